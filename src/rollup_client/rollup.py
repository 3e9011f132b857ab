"""Request descriptors for the rollup job and rollup search endpoints."""

from __future__ import annotations

from .params import BOOL, DURATION, QueryParam
from .request_parameters import EndpointSpec, HttpMethod, RequestParameters

_DOCS = "https://www.elastic.co/guide/en/elasticsearch/reference/master"


class DeleteRollupJobRequestParameters(RequestParameters):
    """Request options for DeleteJob."""

    endpoint = EndpointSpec("rollup.delete_job", HttpMethod.DELETE, False, f"{_DOCS}/rollup-delete-job.html")


class GetRollupJobRequestParameters(RequestParameters):
    """Request options for GetJob."""

    endpoint = EndpointSpec("rollup.get_jobs", HttpMethod.GET, False, f"{_DOCS}/rollup-get-job.html")


class GetRollupCapabilitiesRequestParameters(RequestParameters):
    """Request options for GetCapabilities."""

    endpoint = EndpointSpec(
        "rollup.get_capabilities", HttpMethod.GET, False, f"{_DOCS}/rollup-get-rollup-caps.html"
    )


class GetRollupIndexCapabilitiesRequestParameters(RequestParameters):
    """Request options for GetIndexCapabilities."""

    endpoint = EndpointSpec(
        "rollup.get_index_capabilities", HttpMethod.GET, False, f"{_DOCS}/rollup-get-rollup-index-caps.html"
    )


class CreateRollupJobRequestParameters(RequestParameters):
    """Request options for CreateJob."""

    endpoint = EndpointSpec("rollup.create_job", HttpMethod.PUT, True, f"{_DOCS}/rollup-put-job.html")


class RollupSearchRequestParameters(RequestParameters):
    """Request options for Search."""

    endpoint = EndpointSpec("rollup.search", HttpMethod.POST, True, f"{_DOCS}/rollup-search.html")

    total_hits_as_integer = QueryParam(
        "rest_total_hits_as_int",
        BOOL,
        "Indicates whether hits.total should be rendered as an integer or an object in the rest search response.",
    )
    typed_keys = QueryParam(
        "typed_keys",
        BOOL,
        "Specify whether aggregation and suggester names should be prefixed by their respective types in the response.",
    )


class StartRollupJobRequestParameters(RequestParameters):
    """Request options for StartJob."""

    endpoint = EndpointSpec("rollup.start_job", HttpMethod.POST, False, f"{_DOCS}/rollup-start-job.html")


class StopRollupJobRequestParameters(RequestParameters):
    """Request options for StopJob."""

    endpoint = EndpointSpec("rollup.stop_job", HttpMethod.POST, False, f"{_DOCS}/rollup-stop-job.html")

    # Unset means the engine's own default (30s); never filled in client-side.
    timeout = QueryParam(
        "timeout",
        DURATION,
        "Block for (at maximum) the specified duration while waiting for the job to stop.",
    )
    wait_for_completion = QueryParam(
        "wait_for_completion",
        BOOL,
        "True if the API should block until the job has fully stopped, false if should be executed async.",
    )


ROLLUP_ENDPOINTS: dict[str, type[RequestParameters]] = {
    params.endpoint.name: params
    for params in (
        DeleteRollupJobRequestParameters,
        GetRollupJobRequestParameters,
        GetRollupCapabilitiesRequestParameters,
        GetRollupIndexCapabilitiesRequestParameters,
        CreateRollupJobRequestParameters,
        RollupSearchRequestParameters,
        StartRollupJobRequestParameters,
        StopRollupJobRequestParameters,
    )
}
