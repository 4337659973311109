"""Constraint collector: derives validators for numeric schemas.

The collector is a ``process`` function for the schema walker. For each
numeric leaf schema with range or multiple-of keywords it records a
validator and checks the schema's literal values (default, example and
enum members) against it.
"""

import logging
from dataclasses import dataclass
from typing import Any

from api_schema_walker.parser.base import Schema, Spec
from api_schema_walker.validate.errors import ConstraintError
from api_schema_walker.validate.number import Int, Number, from_schema
from api_schema_walker.walker import free_form_items, walk_all_schemas

logger = logging.getLogger(__name__)


@dataclass
class LiteralViolation:
    """A literal value of a schema that breaks the schema's own constraints."""

    schema: Schema
    source: str  # default / example / enum[i]
    value: Any
    error: ConstraintError


class ConstraintCollector:
    """Collects numeric validators and literal violations during a walk."""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.validators: list[tuple[Schema, Number]] = []
        self.violations: list[LiteralViolation] = []

    def __call__(self, schema: Schema) -> None:
        validator = from_schema(schema)
        if validator is None or not validator.configured():
            return
        self.validators.append((schema, validator))

        for source, value in _literals(schema):
            checked = _coerce(validator, value)
            if checked is None:
                logger.debug("Skipping non-numeric %s literal %r", source, value)
                continue

            check, number = checked
            try:
                check.validate(number)
            except ConstraintError as e:
                if self.strict:
                    raise
                self.violations.append(LiteralViolation(schema, source, value, e))


def _coerce(validator: Number, value: Any) -> tuple[Number, Any] | None:
    """Convert a literal for checking, or None when it is not a number.

    Non-integral literals of integer schemas are checked with the same
    constraints as decimals.
    """
    try:
        return validator, validator.coerce(value)
    except TypeError:
        if not isinstance(validator, Int):
            return None

    check = validator.as_decimal()
    try:
        return check, check.coerce(value)
    except TypeError:
        return None


def _literals(schema: Schema) -> list[tuple[str, Any]]:
    result = []
    if "default" in schema.model_fields_set:
        result.append(("default", schema.default))
    if "example" in schema.model_fields_set:
        result.append(("example", schema.example))
    for i, member in enumerate(schema.enum or []):
        result.append((f"enum[{i}]", member))
    return result


def check_spec(spec: Spec, strict: bool = False, fix_arrays: bool = True) -> ConstraintCollector:
    """Walk the spec and check every numeric literal against its schema.

    With ``fix_arrays`` arrays missing items get a free-form item schema;
    otherwise they raise SchemaDefectError.
    """
    collector = ConstraintCollector(strict=strict)
    walk_all_schemas(spec, collector, free_form_items if fix_arrays else None)
    logger.debug(
        "Checked %d validators, found %d violations",
        len(collector.validators),
        len(collector.violations),
    )
    return collector
