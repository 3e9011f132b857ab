"""Typed parameter store backing every request descriptor.

Values are kept as canonical wire tokens (the strings that end up in the
query string) and converted on the way in and out by a ``WireType``. There is
one ``WireType`` per kind of value, shared by every property of that kind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Generic, TypeVar, overload
from urllib.parse import urlencode

from pydantic import TypeAdapter

from .duration import format_duration, parse_duration
from .errors import ParameterTypeError

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

_QUERY_SAFE_CHARS = ",*"
_adapter_cache: dict[Any, TypeAdapter[Any]] = {}


def _adapter_for(value_type: Any) -> TypeAdapter[Any]:
    adapter = _adapter_cache.get(value_type)
    if adapter is None:
        adapter = TypeAdapter(value_type)
        _adapter_cache[value_type] = adapter
    return adapter


@dataclass(frozen=True, slots=True)
class WireType(Generic[T]):
    """Encode/decode pair for one kind of query-string value.

    ``encode`` and ``decode`` raise ``ValueError`` (pydantic's
    ``ValidationError`` included) when handed something of the wrong shape.
    """

    name: str
    encode: Callable[[T], str]
    decode: Callable[[str], T]


def _encode_bool(value: bool) -> str:
    _adapter_for(bool).validate_python(value, strict=True)
    return "true" if value else "false"


def _decode_bool(token: str) -> bool:
    if token not in ("true", "false"):
        raise ValueError(f"{token!r} is not a boolean token")
    return token == "true"


def _encode_int(value: int) -> str:
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    return str(_adapter_for(int).validate_python(value, strict=True))


def _decode_int(token: str) -> int:
    return _adapter_for(int).validate_python(token)


def _encode_string(value: str) -> str:
    return _adapter_for(str).validate_python(value, strict=True)


def _decode_string(token: str) -> str:
    return token


def _encode_duration(value: timedelta | str | int | float) -> str:
    return format_duration(value)


def _encode_string_list(value: str | Iterable[str]) -> str:
    items = [value] if isinstance(value, str) else list(value)
    items = _adapter_for(list[str]).validate_python(items, strict=True)
    return ",".join(item.strip() for item in items if item.strip())


def _decode_string_list(token: str) -> list[str]:
    return [item for item in token.split(",") if item]


BOOL: WireType[bool] = WireType("bool", _encode_bool, _decode_bool)
INT: WireType[int] = WireType("int", _encode_int, _decode_int)
STRING: WireType[str] = WireType("string", _encode_string, _decode_string)
DURATION: WireType[timedelta] = WireType("duration", _encode_duration, parse_duration)
STRING_LIST: WireType[list[str]] = WireType("string[]", _encode_string_list, _decode_string_list)

_enum_wire_types: dict[type[Enum], WireType[Any]] = {}


def enum_of(enum_type: type[E]) -> WireType[E]:
    """Wire type for a closed set of tokens declared as an ``Enum``.

    Members encode to their ``value``; plain strings are accepted on set when
    they name a valid member value.
    """
    cached = _enum_wire_types.get(enum_type)
    if cached is not None:
        return cached

    def encode(value: E | str) -> str:
        member = _adapter_for(enum_type).validate_python(value)
        return str(member.value)

    def decode(token: str) -> E:
        return _adapter_for(enum_type).validate_python(token)

    wire_type: WireType[E] = WireType(f"enum[{enum_type.__name__}]", encode, decode)
    _enum_wire_types[enum_type] = wire_type
    return wire_type


class ParameterStore:
    """Ordered mapping of wire-parameter name to canonical token.

    A name maps to at most one token. Writing ``None`` (or a value that
    encodes to an empty token) removes the name instead of storing a
    placeholder, so absent parameters never reach the query string.
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Mapping[str, str] | None = None) -> None:
        self._tokens: dict[str, str] = dict(tokens or {})

    def get(self, name: str, wire_type: WireType[T]) -> T | None:
        token = self._tokens.get(name)
        if token is None:
            return None
        try:
            return wire_type.decode(token)
        except ValueError as error:
            raise ParameterTypeError(name, wire_type.name, token) from error

    def set(self, name: str, wire_type: WireType[T], value: T | None) -> None:
        if value is None:
            self.remove(name)
            return
        try:
            token = wire_type.encode(value)
        except (ValueError, TypeError) as error:
            raise ParameterTypeError(name, wire_type.name, value) from error
        if not token:
            self.remove(name)
            return
        logger.debug("set parameter %s=%s", name, token)
        self._tokens[name] = token

    def remove(self, name: str) -> None:
        self._tokens.pop(name, None)

    def raw(self, name: str) -> str | None:
        return self._tokens.get(name)

    def items(self) -> list[tuple[str, str]]:
        return list(self._tokens.items())

    def clear(self) -> None:
        self._tokens.clear()

    def copy(self) -> ParameterStore:
        return ParameterStore(self._tokens)

    def to_dict(self) -> dict[str, str]:
        return dict(self._tokens)

    def to_query_string(self) -> str:
        if not self._tokens:
            return ""
        return urlencode(self._tokens, safe=_QUERY_SAFE_CHARS)

    def __contains__(self, name: object) -> bool:
        return name in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterStore):
            return NotImplemented
        return self._tokens == other._tokens

    def __repr__(self) -> str:
        return f"ParameterStore({self._tokens!r})"


class QueryParam(Generic[T]):
    """Typed attribute bound to one wire-parameter name.

    Declared on a class whose instances expose their ``ParameterStore`` as
    ``store``::

        class StopParams(RequestParameters):
            timeout = QueryParam("timeout", DURATION)
    """

    def __init__(self, wire_name: str, wire_type: WireType[T], doc: str = "") -> None:
        self.wire_name = wire_name
        self.wire_type = wire_type
        self.attribute = wire_name
        self.__doc__ = doc or None

    def __set_name__(self, owner: type, name: str) -> None:
        self.attribute = name

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> QueryParam[T]: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> T | None: ...

    def __get__(self, instance: object | None, owner: type | None = None) -> QueryParam[T] | T | None:
        if instance is None:
            return self
        return instance.store.get(self.wire_name, self.wire_type)  # type: ignore[attr-defined]

    def __set__(self, instance: object, value: T | None) -> None:
        instance.store.set(self.wire_name, self.wire_type, value)  # type: ignore[attr-defined]

    def __delete__(self, instance: object) -> None:
        instance.store.remove(self.wire_name)  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"QueryParam({self.wire_name!r}, {self.wire_type.name})"
