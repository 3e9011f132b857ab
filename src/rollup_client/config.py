"""Configuration helpers for the rollup client."""

from __future__ import annotations

import base64
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:9200"
DEFAULT_PATH_PREFIX = ""
DEFAULT_TIMEOUT_SECONDS = 30.0

_ENV_PREFIX = "ROLLUP_CLIENT_"


@dataclass(slots=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    path_prefix: str = DEFAULT_PATH_PREFIX
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        base_url = _trim_or_default(os.getenv(f"{_ENV_PREFIX}BASE_URL"), DEFAULT_BASE_URL)
        path_prefix = normalize_prefix(os.getenv(f"{_ENV_PREFIX}PATH_PREFIX"))
        timeout_ms = _parse_positive_int(os.getenv(f"{_ENV_PREFIX}TIMEOUT_MS"))
        timeout_seconds = (timeout_ms / 1000.0) if timeout_ms else DEFAULT_TIMEOUT_SECONDS

        headers = auth_headers(
            api_key=os.getenv(f"{_ENV_PREFIX}API_KEY"),
            username=os.getenv(f"{_ENV_PREFIX}USERNAME"),
            password=os.getenv(f"{_ENV_PREFIX}PASSWORD"),
            bearer=os.getenv(f"{_ENV_PREFIX}BEARER_TOKEN"),
        )
        return cls(base_url=base_url, path_prefix=path_prefix, timeout_seconds=timeout_seconds, headers=headers)

    @classmethod
    def from_profile(
        cls,
        profile: str | None = None,
        *,
        config_path: str | Path | None = None,
    ) -> "ClientConfig":
        payload = load_profiles(config_path=config_path)
        profiles = payload.get("profiles")
        current_profile = payload.get("currentProfile")

        selected_name = (profile or current_profile or "local").strip() or "local"
        profile_entry: dict[str, Any] = {}
        if isinstance(profiles, dict) and isinstance(profiles.get(selected_name), dict):
            profile_entry = dict(profiles[selected_name])
        elif isinstance(profiles, dict) and isinstance(profiles.get("local"), dict):
            logger.debug("profile %r not found, using 'local'", selected_name)
            profile_entry = dict(profiles["local"])

        base_url = _trim_or_default(profile_entry.get("baseUrl"), DEFAULT_BASE_URL)
        path_prefix = normalize_prefix(profile_entry.get("pathPrefix"))
        timeout_ms = _parse_positive_int(profile_entry.get("timeoutMs"))
        timeout_seconds = (timeout_ms / 1000.0) if timeout_ms else DEFAULT_TIMEOUT_SECONDS

        headers: dict[str, str] = {}
        raw_headers = profile_entry.get("headers")
        if isinstance(raw_headers, dict):
            for key, value in raw_headers.items():
                if isinstance(key, str) and isinstance(value, str) and key.strip() and value.strip():
                    headers[key] = value

        auth = profile_entry.get("auth")
        if isinstance(auth, dict):
            headers.update(
                auth_headers(
                    api_key=auth.get("apiKey"),
                    username=auth.get("username"),
                    password=auth.get("password"),
                    bearer=auth.get("bearer"),
                )
            )

        return cls(base_url=base_url, path_prefix=path_prefix, timeout_seconds=timeout_seconds, headers=headers)


def auth_headers(
    *,
    api_key: Any = None,
    username: Any = None,
    password: Any = None,
    bearer: Any = None,
) -> dict[str, str]:
    """Build the ``Authorization`` header; API key wins over basic over bearer."""
    api_key = _trim_or_none(api_key)
    if api_key:
        return {"Authorization": f"ApiKey {api_key}"}

    username = _trim_or_none(username)
    if username:
        secret = password if isinstance(password, str) else ""
        token = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    bearer = _trim_or_none(bearer)
    if bearer:
        return {"Authorization": f"Bearer {bearer}"}
    return {}


def normalize_prefix(value: Any) -> str:
    trimmed = value.strip().rstrip("/") if isinstance(value, str) else ""
    if not trimmed:
        return DEFAULT_PATH_PREFIX
    return trimmed if trimmed.startswith("/") else f"/{trimmed}"


def default_profiles_path() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    root = Path(xdg) if xdg else Path.home() / ".config"
    return root / "rollup-client" / "config.json"


def load_profiles(*, config_path: str | Path | None = None) -> dict[str, Any]:
    path = Path(config_path) if config_path else default_profiles_path()
    if not path.exists():
        return {"currentProfile": "local", "profiles": {}}

    try:
        with path.open("r", encoding="utf-8") as handle:
            parsed = json.load(handle)
    except (OSError, json.JSONDecodeError) as error:
        logger.debug("ignoring unreadable profiles file %s: %s", path, error)
        return {"currentProfile": "local", "profiles": {}}

    if not isinstance(parsed, dict):
        return {"currentProfile": "local", "profiles": {}}
    return parsed


def _trim_or_none(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if trimmed else None


def _trim_or_default(value: Any, fallback: str) -> str:
    if not isinstance(value, str):
        return fallback
    trimmed = value.strip()
    return trimmed if trimmed else fallback


def _parse_positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None
