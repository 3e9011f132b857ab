from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest

from rollup_client.config import DEFAULT_BASE_URL, ClientConfig, auth_headers, normalize_prefix


def test_from_profile_loads_profile_shape(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "currentProfile": "staging",
                "profiles": {
                    "staging": {
                        "baseUrl": "https://search.staging.internal:9200",
                        "pathPrefix": "search/",
                        "timeoutMs": 45000,
                        "headers": {"x-opaque-id": "rollup-jobs"},
                        "auth": {"apiKey": "abc"},
                    }
                },
            }
        ),
        encoding="utf-8",
    )

    cfg = ClientConfig.from_profile(config_path=config_path)
    assert cfg.base_url == "https://search.staging.internal:9200"
    assert cfg.path_prefix == "/search"
    assert cfg.timeout_seconds == 45.0
    assert cfg.headers["x-opaque-id"] == "rollup-jobs"
    assert cfg.headers["Authorization"] == "ApiKey abc"


def test_from_profile_falls_back_on_malformed_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json", encoding="utf-8")

    cfg = ClientConfig.from_profile("missing", config_path=config_path)
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.path_prefix == ""
    assert cfg.timeout_seconds == 30.0
    assert cfg.headers == {}


def test_from_env_reads_basic_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROLLUP_CLIENT_BASE_URL", "http://es.local:9200")
    monkeypatch.setenv("ROLLUP_CLIENT_TIMEOUT_MS", "5000")
    monkeypatch.setenv("ROLLUP_CLIENT_USERNAME", "elastic")
    monkeypatch.setenv("ROLLUP_CLIENT_PASSWORD", "changeme")
    monkeypatch.delenv("ROLLUP_CLIENT_API_KEY", raising=False)
    monkeypatch.delenv("ROLLUP_CLIENT_PATH_PREFIX", raising=False)

    cfg = ClientConfig.from_env()
    expected = base64.b64encode(b"elastic:changeme").decode("ascii")
    assert cfg.base_url == "http://es.local:9200"
    assert cfg.timeout_seconds == 5.0
    assert cfg.headers == {"Authorization": f"Basic {expected}"}


def test_from_env_ignores_invalid_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROLLUP_CLIENT_TIMEOUT_MS", "-5")
    assert ClientConfig.from_env().timeout_seconds == 30.0


def test_auth_header_precedence() -> None:
    assert auth_headers(api_key="key", username="user", bearer="token") == {"Authorization": "ApiKey key"}
    assert auth_headers(bearer=" token ") == {"Authorization": "Bearer token"}
    assert auth_headers(api_key="  ") == {}


def test_normalize_prefix() -> None:
    assert normalize_prefix(None) == ""
    assert normalize_prefix("  ") == ""
    assert normalize_prefix("search") == "/search"
    assert normalize_prefix("/search/") == "/search"
