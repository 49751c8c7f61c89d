"""
Request and response schema for country information exchanges.

The two records are declared once here and drive every direction of the
exchange: encoding the user message, rendering the schema block of the
system prompt, and strictly decoding the model's reply.

Decoding follows the protobuf JSON mapping for these messages: every field
may be spelled with its schema name (``country_population``) or its
lowerCamelCase JSON name (``countryPopulation``) but not both, unknown or
repeated fields are rejected, and integers must fit their declared width.
Unlike protobuf, all response fields are required.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .client.errors import ResponseDecodeError

logger = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Key under json_schema_extra holding the protobuf scalar type of a field
PROTO_TYPE_KEY = "proto_type"

_FENCE_RE = re.compile(
    r"^\s*```[\w+-]*[ \t]*\r?\n(?P<body>.*?)\r?\n?[ \t]*```\s*$",
    re.DOTALL,
)


def string_field(**kwargs: Any) -> Any:
    """A strict string field."""
    return Field(strict=True, json_schema_extra={PROTO_TYPE_KEY: "string"}, **kwargs)


def int32_field(**kwargs: Any) -> Any:
    """A strict integer field bounded to 32 bits."""
    return Field(
        strict=True,
        ge=INT32_MIN,
        le=INT32_MAX,
        json_schema_extra={PROTO_TYPE_KEY: "int32"},
        **kwargs
    )


def int64_field(**kwargs: Any) -> Any:
    """A strict integer field bounded to 64 bits."""
    return Field(
        strict=True,
        ge=INT64_MIN,
        le=INT64_MAX,
        json_schema_extra={PROTO_TYPE_KEY: "int64"},
        **kwargs
    )


class SchemaMessage(BaseModel):
    """Base class for the immutable, schema-constrained records."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        loc_by_alias=False,
    )

    @classmethod
    def proto_fields(cls) -> List[Tuple[str, str]]:
        """Return (field name, protobuf type) pairs in declaration order."""
        fields = []
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra
            proto_type = extra.get(PROTO_TYPE_KEY) if isinstance(extra, dict) else None
            if proto_type is None:
                raise TypeError(f"{cls.__name__}.{name} has no protobuf type")
            fields.append((name, proto_type))
        return fields

    def to_json(self) -> str:
        """Serialize to compact JSON, omitting fields left at their zero value."""
        return self.model_dump_json(exclude_defaults=True)


class CountryRequest(SchemaMessage):
    """The request sent to the model as the user message."""

    country: str = string_field(default="")


class CountryResponse(SchemaMessage):
    """The record the model must reply with."""

    country: str = string_field()
    country_population: int = int32_field()
    capital: str = string_field()
    capital_population: int = int32_field()
    gdp_usd: int = int64_field()


class ReplyPolicy(str, Enum):
    """How much formatting around the reply the decoder tolerates."""

    STRICT = "strict"
    STRIP_FENCES = "strip_fences"


def encode_country_request(country: str) -> str:
    """Build a CountryRequest for ``country`` and serialize it."""
    encoded = CountryRequest(country=country).to_json()
    logger.debug(f"Encoded request: {encoded}")
    return encoded


def is_fenced(text: str) -> bool:
    """Check whether the text starts with a markdown code fence."""
    return text.lstrip().startswith("```")


def strip_code_fence(text: str) -> str:
    """Remove one markdown code fence wrapping the whole text, if present."""
    match = _FENCE_RE.match(text)
    if match:
        return match.group("body").strip()
    return text.strip()


class DuplicateKeyError(ValueError):
    """A JSON object repeats a key."""


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise DuplicateKeyError(f"duplicate key {key!r}")
        obj[key] = value
    return obj


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid constant {name}")


def duplicate_spellings(model: Type[SchemaMessage], data: Any) -> List[str]:
    """Report fields given under both their schema name and their JSON name."""
    if not isinstance(data, dict):
        return []

    spellings = {}
    for name, info in model.model_fields.items():
        spellings[name] = name
        if info.alias:
            spellings[info.alias] = name

    seen: Dict[str, str] = {}
    errors = []
    for key in data:
        name = spellings.get(key)
        if name is None:
            continue
        if name in seen:
            errors.append(f"{name}: given as both {seen[name]!r} and {key!r}")
        else:
            seen[name] = key
    return errors


def decode_message(
    model: Type[SchemaMessage],
    text: str,
    policy: ReplyPolicy = ReplyPolicy.STRICT,
) -> SchemaMessage:
    """
    Decode text into a schema message.

    Args:
        model: The message class to decode into
        text: Raw reply text
        policy: Reply formatting policy

    Returns:
        The decoded message

    Raises:
        ResponseDecodeError: If the text is not a JSON object matching the schema
    """
    payload = text
    if policy == ReplyPolicy.STRIP_FENCES:
        payload = strip_code_fence(text)
    elif is_fenced(text):
        raise ResponseDecodeError(
            f"{model.__name__} decode failed: reply is wrapped in a markdown code fence",
            raw_text=text,
            errors=["reply starts with ```"],
        )

    try:
        data = json.loads(
            payload,
            object_pairs_hook=_reject_duplicate_keys,
            parse_constant=_reject_constant,
        )
    except ValueError as e:
        errors = [f"(root): Invalid JSON: {e}"]
        raise ResponseDecodeError(
            f"{model.__name__} decode failed: {errors[0]}",
            raw_text=text,
            errors=errors,
            original_error=e,
        ) from e

    errors = duplicate_spellings(model, data)
    if errors:
        raise ResponseDecodeError(
            f"{model.__name__} decode failed: {'; '.join(errors)}",
            raw_text=text,
            errors=errors,
        )

    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = format_validation_errors(e)
        logger.debug(f"{model.__name__} decode failed: {errors}")
        raise ResponseDecodeError(
            f"{model.__name__} decode failed: {'; '.join(errors)}",
            raw_text=text,
            errors=errors,
            original_error=e,
        ) from e


def decode_country_response(
    text: str,
    policy: ReplyPolicy = ReplyPolicy.STRICT,
) -> CountryResponse:
    """Strictly decode a model reply into a CountryResponse."""
    return decode_message(CountryResponse, text, policy)  # type: ignore[return-value]


def format_validation_errors(error: ValidationError) -> List[str]:
    """Flatten pydantic validation errors to ``field: message`` strings."""
    formatted = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "(root)"
        formatted.append(f"{location}: {item['msg']}")
    return formatted


def to_display_rows(message: SchemaMessage) -> List[Tuple[str, str]]:
    """Return (field, value) pairs for printing a decoded message."""
    data: Dict[str, Any] = message.model_dump()
    return [(name, str(data[name])) for name, _ in message.proto_fields()]
