"""Create, start, query and stop a rollup job against a local cluster.

Connection settings come from ROLLUP_CLIENT_* environment variables.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from rollup_client import (
    BackoffRetry,
    NotFoundError,
    RequestCall,
    RollupClient,
    RollupSearchRequestParameters,
    StopRollupJobRequestParameters,
)

JOB_ID = "sensor"
JOB_CONFIG = {
    "index_pattern": "sensor-*",
    "rollup_index": "sensor_rollup",
    "cron": "*/30 * * * * ?",
    "page_size": 1000,
    "groups": {
        "date_histogram": {"field": "timestamp", "fixed_interval": "1h", "delay": "7d"},
        "terms": {"fields": ["node"]},
    },
    "metrics": [
        {"field": "temperature", "metrics": ["min", "max", "sum"]},
        {"field": "voltage", "metrics": ["avg"]},
    ],
}


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    with RollupClient.from_env(retry_policy=BackoffRetry()) as client:

        @client.before("rollup.*")
        def log_call(call: RequestCall) -> None:
            logging.info("%s %s %s", call.method, call.path, call.query)

        try:
            client.rollup.delete_job(JOB_ID)
        except NotFoundError:
            pass

        client.rollup.create_job(JOB_ID, JOB_CONFIG)
        client.rollup.start_job(JOB_ID)
        print(client.rollup.get_jobs(JOB_ID, filter_path=["jobs.status"]))

        search = RollupSearchRequestParameters(typed_keys=True, total_hits_as_integer=True)
        result = client.rollup.search(
            "sensor_rollup",
            {"size": 0, "aggregations": {"max_temperature": {"max": {"field": "temperature"}}}},
            params=search,
        )
        print(result.get("aggregations"))

        stop = StopRollupJobRequestParameters(wait_for_completion=True, timeout=timedelta(seconds=10))
        print(client.rollup.stop_job(JOB_ID, params=stop))


if __name__ == "__main__":
    main()
