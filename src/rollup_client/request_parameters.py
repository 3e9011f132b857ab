"""Request descriptors: per-endpoint parameter bags over a ``ParameterStore``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .params import BOOL, STRING, STRING_LIST, ParameterStore, QueryParam


class HttpMethod(str, Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @property
    def is_safe(self) -> bool:
        """True for methods that never change server state."""
        return self in (HttpMethod.GET, HttpMethod.HEAD)


@dataclass(frozen=True, slots=True)
class EndpointSpec:
    name: str
    method: HttpMethod
    supports_body: bool
    documentation: str | None = None

    @property
    def retry_safe(self) -> bool:
        # Rollup search is a POST, so it is never replayed.
        return self.method.is_safe


class RequestParameters:
    """Base class for endpoint request descriptors.

    Each subclass sets ``endpoint`` and declares its own ``QueryParam``
    attributes. The HTTP method and body support come from ``endpoint`` and
    never change for the lifetime of the class. Every instance owns a private
    ``ParameterStore``.
    """

    endpoint: ClassVar[EndpointSpec]
    _query_params: ClassVar[dict[str, QueryParam[Any]]] = {}

    pretty = QueryParam("pretty", BOOL, "Pretty format the returned JSON response.")
    human = QueryParam("human", BOOL, "Return human readable values for statistics.")
    error_trace = QueryParam("error_trace", BOOL, "Include the stack trace of returned errors.")
    filter_path = QueryParam(
        "filter_path",
        STRING_LIST,
        "A comma-separated list of filters used to reduce the response.",
    )
    source_query = QueryParam(
        "source",
        STRING,
        "The URL-encoded request definition, for clients that do not accept a request body.",
    )

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared: dict[str, QueryParam[Any]] = {}
        for klass in reversed(cls.__mro__):
            for attribute, value in vars(klass).items():
                if isinstance(value, QueryParam):
                    declared[attribute] = value
                else:
                    # A plain attribute in a subclass shadows the inherited parameter.
                    declared.pop(attribute, None)

        owners: dict[str, str] = {}
        for attribute, param in declared.items():
            previous = owners.setdefault(param.wire_name, attribute)
            if previous != attribute:
                raise TypeError(
                    f"{cls.__name__}.{attribute} reuses wire name {param.wire_name!r} "
                    f"already bound to {previous}"
                )
        cls._query_params = declared

    def __init__(self, **values: Any) -> None:
        self._store = ParameterStore()
        for attribute, value in values.items():
            if attribute not in self._query_params:
                raise TypeError(f"{type(self).__name__} has no query parameter {attribute!r}")
            setattr(self, attribute, value)

    @property
    def store(self) -> ParameterStore:
        return self._store

    @property
    def default_http_method(self) -> HttpMethod:
        return self.endpoint.method

    @property
    def supports_body(self) -> bool:
        return self.endpoint.supports_body

    @property
    def operation(self) -> str:
        return self.endpoint.name

    @classmethod
    def query_param_names(cls) -> dict[str, str]:
        """Map attribute name to wire name for every declared parameter."""
        return {attribute: param.wire_name for attribute, param in cls._query_params.items()}

    def query_params(self) -> dict[str, str]:
        # Fresh dict: callers dispatch this snapshot, not the live store.
        return self._store.to_dict()

    def query_string(self) -> str:
        return self._store.to_query_string()

    def copy(self) -> RequestParameters:
        clone = type(self).__new__(type(self))
        clone._store = self._store.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._store == other._store  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(
            f"{attribute}={getattr(self, attribute)!r}"
            for attribute, param in self._query_params.items()
            if param.wire_name in self._store
        )
        return f"{type(self).__name__}({values})"
