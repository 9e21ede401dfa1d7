# === NAVMAP v1 ===
# {
#   "module": "EndpointKit.codec",
#   "purpose": "JSON codec strategies, payload encoding, typed decoding and key-path extraction.",
#   "sections": [
#     {"id": "strategies", "name": "Codec Strategies", "anchor": "STR", "kind": "api"},
#     {"id": "encode-payload", "name": "encode_payload", "anchor": "function-encode-payload", "kind": "function"},
#     {"id": "decode-payload", "name": "decode_payload", "anchor": "function-decode-payload", "kind": "function"},
#     {"id": "extract-key-path", "name": "extract_key_path", "anchor": "function-extract-key-path", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""JSON codec used by endpoints for request bodies and response payloads.

Typed validation and dumping is delegated to ``pydantic`` (``TypeAdapter``) so
any shape pydantic understands can be used as a decode target: ``BaseModel``
subclasses, dataclasses, ``TypedDict`` definitions and plain generics such as
``list[int]``.  The three strategies of :class:`CodecConfig` are applied around
that validation step:

- **Key strategy**: rewrites mapping keys between the wire form and the
  attribute form using ``pydantic.alias_generators``.
- **Date strategy**: controls how ``datetime``/``date`` values are written and
  read (pydantic default, ISO-8601 strings, or Unix epoch numbers).
- **Data strategy**: controls how ``bytes`` values are written and read
  (base64, hex, or pydantic's default UTF-8 handling).

Key-path extraction operates on the untyped JSON tree only and never looks at
the decode target.
"""

from __future__ import annotations

import base64
import collections.abc as cabc
import dataclasses
import json
import logging
import types
import typing
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from functools import lru_cache
from typing import Any, Annotated, Mapping, Union, get_args, get_origin

import pydantic_core
from pydantic import BaseModel, TypeAdapter
from pydantic.alias_generators import to_camel, to_snake

from .errors import CorruptData, DecodingError, EncodingError

logger = logging.getLogger(__name__)

__all__ = [
    "KeyStrategy",
    "DateStrategy",
    "DataStrategy",
    "CodecConfig",
    "DEFAULT_CODEC",
    "encode_payload",
    "decode_payload",
    "extract_key_path",
    "resolve_key_path",
]


# ============================================================================
# Codec Strategies
# ============================================================================


class KeyStrategy(str, Enum):
    """Mapping between wire keys and attribute names.

    The conversion is applied to every JSON object key in the document,
    including keys of free-form ``dict`` payloads, not only to model field
    names.  Conversions are lossy for keys that do not follow either casing
    convention (``"HTTPCode"`` does not survive a round trip); use
    ``USE_DEFAULT_KEYS`` with pydantic field aliases for such documents.
    """

    #: Keys are used exactly as they appear on both sides.
    USE_DEFAULT_KEYS = "use_default_keys"
    #: Wire keys are snake_case, attribute names camelCase.
    SNAKE_CASE = "snake_case"
    #: Wire keys are camelCase, attribute names snake_case.
    CAMEL_CASE = "camel_case"


class DateStrategy(str, Enum):
    """Representation of ``datetime``/``date`` values on the wire."""

    DEFERRED = "deferred"
    ISO8601 = "iso8601"
    SECONDS_SINCE_1970 = "seconds_since_1970"
    MILLISECONDS_SINCE_1970 = "milliseconds_since_1970"


class DataStrategy(str, Enum):
    """Representation of ``bytes`` values on the wire."""

    DEFERRED = "deferred"
    BASE64 = "base64"
    HEX = "hex"


@dataclass(frozen=True)
class CodecConfig:
    """Immutable encoder/decoder configuration shared by one endpoint."""

    key_strategy: KeyStrategy = KeyStrategy.USE_DEFAULT_KEYS
    date_strategy: DateStrategy = DateStrategy.DEFERRED
    data_strategy: DataStrategy = DataStrategy.BASE64


DEFAULT_CODEC = CodecConfig()

_SEQUENCE_ORIGINS = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        cabc.Sequence,
        cabc.MutableSequence,
        cabc.Set,
        cabc.MutableSet,
        cabc.Iterable,
        cabc.Collection,
    }
)
_MAPPING_ORIGINS = frozenset({dict, cabc.Mapping, cabc.MutableMapping})
_UNION_ORIGINS = frozenset({Union, types.UnionType})


@lru_cache(maxsize=256)
def _type_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


# ============================================================================
# Keys
# ============================================================================


def _wire_key(name: str, strategy: KeyStrategy) -> str:
    if strategy is KeyStrategy.SNAKE_CASE:
        return to_snake(name)
    if strategy is KeyStrategy.CAMEL_CASE:
        return to_camel(name)
    return name


def _attribute_key(key: str, strategy: KeyStrategy) -> str:
    if strategy is KeyStrategy.SNAKE_CASE:
        return to_camel(key)
    if strategy is KeyStrategy.CAMEL_CASE:
        return to_snake(key)
    return key


def _decode_keys(node: Any, strategy: KeyStrategy) -> Any:
    if strategy is KeyStrategy.USE_DEFAULT_KEYS:
        return node
    if isinstance(node, dict):
        return {
            _attribute_key(key, strategy): _decode_keys(value, strategy)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [_decode_keys(item, strategy) for item in node]
    return node


# ============================================================================
# Encoding
# ============================================================================


def _as_utc(value: datetime | date) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _encode_date(value: datetime | date, strategy: DateStrategy) -> Any:
    if strategy is DateStrategy.ISO8601:
        return value.isoformat()
    if strategy is DateStrategy.SECONDS_SINCE_1970:
        return _as_utc(value).timestamp()
    if strategy is DateStrategy.MILLISECONDS_SINCE_1970:
        return _as_utc(value).timestamp() * 1000.0
    return value


def _encode_data(value: bytes | bytearray, strategy: DataStrategy) -> Any:
    if strategy is DataStrategy.BASE64:
        return base64.b64encode(bytes(value)).decode("ascii")
    if strategy is DataStrategy.HEX:
        return bytes(value).hex()
    return bytes(value)


def _encode_tree(node: Any, config: CodecConfig) -> Any:
    if isinstance(node, Mapping):
        return {
            (_wire_key(key, config.key_strategy) if isinstance(key, str) else key): _encode_tree(
                value, config
            )
            for key, value in node.items()
        }
    if isinstance(node, (list, tuple, set, frozenset)):
        return [_encode_tree(item, config) for item in node]
    if isinstance(node, (datetime, date)):
        return _encode_date(node, config.date_strategy)
    if isinstance(node, (bytes, bytearray)):
        return _encode_data(node, config.data_strategy)
    return node


def encode_payload(value: Any, config: CodecConfig = DEFAULT_CODEC) -> bytes:
    """Serialise ``value`` into JSON bytes using ``config``.

    Args:
        value: Any value pydantic can dump (models, dataclasses, mappings,
            sequences, scalars).
        config: Strategies applied to keys, dates and binary data.

    Returns:
        UTF-8 encoded JSON document.

    Raises:
        EncodingError: If the value cannot be serialised.

    Examples:
        >>> encode_payload({"name": "morpheus", "job": "leader"})
        b'{"name":"morpheus","job":"leader"}'
    """
    try:
        tree = _type_adapter(type(value)).dump_python(value, mode="python", by_alias=True)
        return pydantic_core.to_json(_encode_tree(tree, config))
    except (TypeError, ValueError, OverflowError) as exc:
        raise EncodingError(exc) from exc


# ============================================================================
# Decoding
# ============================================================================


def _field_annotations(annotation: Any) -> dict[str, Any]:
    """Map wire-side field names of a structured type to their annotations."""
    if not isinstance(annotation, type):
        return {}
    if issubclass(annotation, BaseModel):
        fields: dict[str, Any] = {}
        for name, info in annotation.model_fields.items():
            fields[name] = info.annotation
            if isinstance(info.alias, str):
                fields[info.alias] = info.annotation
            if isinstance(info.validation_alias, str):
                fields[info.validation_alias] = info.annotation
        return fields
    if dataclasses.is_dataclass(annotation) or typing.is_typeddict(annotation):
        try:
            return typing.get_type_hints(annotation)
        except (NameError, TypeError):
            logger.debug("Unable to resolve type hints for %s", annotation)
            return {}
    return {}


def _decode_date(node: Any, annotation: Any, strategy: DateStrategy) -> Any:
    if strategy is DateStrategy.ISO8601:
        if not isinstance(node, str):
            raise ValueError(f"Expected an ISO-8601 string, got {node!r}")
        parsed = datetime.fromisoformat(node.replace("Z", "+00:00"))
    elif strategy in (DateStrategy.SECONDS_SINCE_1970, DateStrategy.MILLISECONDS_SINCE_1970):
        if isinstance(node, bool) or not isinstance(node, (int, float)):
            raise ValueError(f"Expected a Unix timestamp, got {node!r}")
        seconds = node / 1000.0 if strategy is DateStrategy.MILLISECONDS_SINCE_1970 else node
        parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
    else:
        return node
    if annotation is date:
        return parsed.date()
    return parsed


def _decode_data(node: Any, strategy: DataStrategy) -> Any:
    if not isinstance(node, str):
        return node
    if strategy is DataStrategy.BASE64:
        return base64.b64decode(node, validate=True)
    if strategy is DataStrategy.HEX:
        return bytes.fromhex(node)
    return node


def _coerce(node: Any, annotation: Any, config: CodecConfig) -> Any:
    """Apply date/data strategies to ``node`` guided by the target annotation."""
    if node is None or annotation is Any:
        return node

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _coerce(node, args[0], config)
    if origin in _UNION_ORIGINS:
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return _coerce(node, candidates[0], config)
        return node
    if origin in _SEQUENCE_ORIGINS and isinstance(node, list):
        if origin is tuple and args and args[-1] is not Ellipsis:
            head = [_coerce(item, arg, config) for item, arg in zip(node, args)]
            return head + node[len(args) :]
        item_type = args[0] if args else Any
        return [_coerce(item, item_type, config) for item in node]
    if origin in _MAPPING_ORIGINS and isinstance(node, dict):
        value_type = args[1] if len(args) == 2 else Any
        return {key: _coerce(value, value_type, config) for key, value in node.items()}
    if isinstance(node, dict):
        fields = _field_annotations(origin or annotation)
        if not fields:
            return node
        return {key: _coerce(value, fields.get(key, Any), config) for key, value in node.items()}

    if annotation in (datetime, date):
        return _decode_date(node, annotation, config.date_strategy)
    if annotation in (bytes, bytearray):
        return _decode_data(node, config.data_strategy)
    return node


def decode_payload(data: bytes, target: Any, config: CodecConfig = DEFAULT_CODEC) -> Any:
    """Decode JSON ``data`` into an instance of ``target``.

    Args:
        data: Raw JSON document.
        target: Decode target understood by ``pydantic.TypeAdapter``.
        config: Strategies applied to keys, dates and binary data.

    Returns:
        Validated instance of ``target``.

    Raises:
        DecodingError: If the bytes are not JSON or do not match ``target``.
    """
    try:
        tree = json.loads(data)
        tree = _decode_keys(tree, config.key_strategy)
        if config.date_strategy is not DateStrategy.DEFERRED or (
            config.data_strategy is not DataStrategy.DEFERRED
        ):
            tree = _coerce(tree, target, config)
        return _type_adapter(target).validate_python(tree)
    except (TypeError, ValueError, OverflowError) as exc:
        raise DecodingError(exc) from exc


# ============================================================================
# Key-path extraction
# ============================================================================


def resolve_key_path(root: Any, key_path: str) -> Any:
    """Return the value at dotted ``key_path`` inside nested JSON objects.

    Raises:
        KeyError: If any segment of the path does not resolve.

    Examples:
        >>> resolve_key_path({"data": {"x": 1}}, "data.x")
        1
    """
    node = root
    for segment in key_path.split("."):
        if not isinstance(node, dict) or segment not in node:
            raise KeyError(key_path)
        node = node[segment]
    return node


def extract_key_path(data: bytes, key_path: str) -> bytes:
    """Return the JSON bytes of the sub-document at ``key_path``.

    A path that does not resolve, or a document whose root is not a JSON
    object, yields the original ``data`` unchanged; decoding then runs against
    the full document.

    Raises:
        CorruptData: If ``data`` is not a JSON document at all.
    """
    try:
        root = json.loads(data)
    except ValueError as exc:
        raise CorruptData(f"The response body is not valid JSON: {exc}") from exc
    if not isinstance(root, dict):
        return data
    try:
        nested = resolve_key_path(root, key_path)
    except KeyError:
        logger.debug(
            "Key path did not resolve; decoding full document",
            extra={"extra_fields": {"key_path": key_path}},
        )
        return data
    return json.dumps(nested).encode("utf-8")
