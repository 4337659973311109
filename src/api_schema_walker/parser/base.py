"""Unified data models for OpenAPI documents.

The walker and the constraint validators consume these models. They are
built from an already-deserialized mapping with ``Spec.model_validate``;
OpenAPI key names are accepted as aliases of the snake_case fields.
"""

from __future__ import annotations

import operator
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SchemaType(str, Enum):
    """Kind of a schema node. ``ANY`` is an untyped (free-form) schema."""

    ANY = ""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Property(_Model):
    """A named property of an object schema."""

    name: str
    schema_: Schema | None = Field(None, alias="schema")


class SingleItems(_Model):
    """Item descriptor of a homogeneous array."""

    kind: Literal["single"] = "single"
    item: Schema


class TupleItems(_Model):
    """Item descriptors of a tuple-typed array, one schema per position."""

    kind: Literal["tuple"] = "tuple"
    items: list[Schema]


Items = Annotated[SingleItems | TupleItems, Field(discriminator="kind")]

_NUMERIC_KEYS = ("minimum", "maximum", "multipleOf", "multiple_of")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, Decimal)) and not isinstance(value, bool)


class Schema(_Model):
    """A node of the recursive schema tree."""

    type: SchemaType = SchemaType.ANY
    ref: str = Field("", alias="$ref")
    format: str = ""
    all_of: list[Schema] = Field([], alias="allOf")
    one_of: list[Schema] = Field([], alias="oneOf")
    properties: list[Property] = []  # declaration order
    items: Items | None = None

    minimum: Decimal | None = None
    maximum: Decimal | None = None
    exclusive_minimum: bool = Field(False, alias="exclusiveMinimum")
    exclusive_maximum: bool = Field(False, alias="exclusiveMaximum")
    multiple_of: Decimal | None = Field(None, alias="multipleOf")

    default: Any = None
    example: Any = None
    enum: list[Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # OpenAPI 3.1 allows a list of types, e.g. ["integer", "null"].
        raw_type = data.get("type")
        if isinstance(raw_type, list):
            kinds = [t for t in raw_type if t != "null"]
            data["type"] = kinds[0] if kinds else "null"

        props = data.get("properties")
        if isinstance(props, dict):
            data["properties"] = [{"name": k, "schema": v} for k, v in props.items()]

        items = data.get("items")
        # Already wrapped items (e.g. from model_dump) carry their "kind" tag.
        if isinstance(items, dict) and "kind" not in items:
            data["items"] = {"kind": "single", "item": items}
        elif isinstance(items, list):
            data["items"] = {"kind": "tuple", "items": items}

        for key in _NUMERIC_KEYS + ("exclusiveMinimum", "exclusiveMaximum"):
            if isinstance(data.get(key), float):
                data[key] = Decimal(repr(data[key]))

        # OpenAPI 3.1 numeric exclusive bounds apply alongside the inclusive
        # ones; the stricter bound wins, the exclusive one on a tie.
        for bound, flag, stricter in (
            ("minimum", "exclusiveMinimum", operator.ge),
            ("maximum", "exclusiveMaximum", operator.le),
        ):
            raw = data.get(flag)
            if not _is_number(raw):
                continue
            inclusive = data.get(bound)
            if _is_number(inclusive) and not stricter(raw, inclusive):
                data[flag] = False
            else:
                data[bound] = raw
                data[flag] = True
        return data


class MediaType(_Model):
    """Schema attached to a single media type."""

    schema_: Schema | None = Field(None, alias="schema")


class Parameter(_Model):
    """A single operation parameter (query, path, header, or cookie)."""

    schema_: Schema | None = Field(None, alias="schema")
    content: dict[str, MediaType] = {}


class RequestBody(_Model):
    content: dict[str, MediaType] = {}


class Response(_Model):
    content: dict[str, MediaType] = {}


class Operation(_Model):
    """A single HTTP operation of a path item."""

    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(None, alias="requestBody")
    responses: dict[str, Response] = {}

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_codes(cls, value: Any) -> Any:
        # YAML loads bare status codes (200:) as integers.
        if isinstance(value, dict):
            return {str(k): v for k, v in value.items()}
        return value


class PathItem(_Model):
    """Operations of a single path, one slot per HTTP method."""

    parameters: list[Parameter] = []
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operations(self) -> list[Operation | None]:
        """Method slots in fixed order: get, put, post, delete, options, head, patch, trace."""
        return [
            self.get,
            self.put,
            self.post,
            self.delete,
            self.options,
            self.head,
            self.patch,
            self.trace,
        ]


class Components(_Model):
    schemas: dict[str, Schema] = {}
    parameters: dict[str, Parameter] = {}


class Spec(_Model):
    """Root of a parsed OpenAPI document."""

    paths: dict[str, PathItem] = {}
    components: Components = Field(default_factory=Components)


Property.model_rebuild()
SingleItems.model_rebuild()
TupleItems.model_rebuild()
Schema.model_rebuild()
