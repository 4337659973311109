"""Schema walker that visits every primitive schema of a spec exactly once.

Object and array schemas are descended into; every other schema is handed
to the caller's ``process`` function. References (``$ref``) are opaque and
never followed: a referenced component is walked once, at its declaration
in ``components.schemas``.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from api_schema_walker.parser.base import (
    Operation,
    Parameter,
    Schema,
    SchemaType,
    SingleItems,
    Spec,
    TupleItems,
)

logger = logging.getLogger(__name__)


class Defect(Enum):
    """Recoverable structural defects reported to the repair function."""

    MISSING_ITEMS_IN_ARRAY = "missing items in array"


class WalkerUsageError(ValueError):
    """Raised when the walker is called with invalid arguments."""


class SchemaDefectError(Exception):
    """A structural defect that was not repaired."""

    def __init__(self, defect: Defect, name: str, schema: Schema):
        self.defect = defect
        self.name = name
        self.schema = schema
        where = f" (property {name!r})" if name else ""
        super().__init__(f"{defect.value}{where}")


ProcessSchema = Callable[[Schema], None]
RepairSchema = Callable[[Defect, str, Schema], None]


def fail_on_defect(defect: Defect, name: str, schema: Schema) -> None:
    """Default repair function: every defect aborts the walk."""
    raise SchemaDefectError(defect, name, schema)


def free_form_items(defect: Defect, name: str, schema: Schema) -> None:
    """Repair arrays without items by giving them a free-form item schema."""
    if defect is not Defect.MISSING_ITEMS_IN_ARRAY:
        raise SchemaDefectError(defect, name, schema)
    schema.items = SingleItems(item=Schema())


def walk_all_schemas(spec: Spec, process: ProcessSchema, repair: RepairSchema | None = None) -> None:
    """Call ``process`` on each primitive schema of the spec.

    When a structural defect is found (see ``Defect``), ``repair`` is called
    with the defect, the enclosing property name ("" when there is none) and
    the offending schema. Returning normally tolerates the defect; raising
    aborts the walk. Without a repair function every defect raises
    ``SchemaDefectError``.

    Exceptions raised by ``process`` or ``repair`` propagate unchanged.
    """
    if process is None:
        raise WalkerUsageError("process function is None")

    walker = _Walker(process, repair or fail_on_defect)
    logger.debug("Walking %d paths", len(spec.paths))

    for item in spec.paths.values():
        walker.walk_parameters(item.parameters)
        for op in item.operations():
            walker.walk_operation(op)

    walker.walk_parameters(spec.components.parameters.values())
    for schema in spec.components.schemas.values():
        walker.walk_schema("", schema)

    logger.debug("Processed %d primitive schemas", walker.processed)


class _Walker:
    def __init__(self, process: ProcessSchema, repair: RepairSchema):
        self.process = process
        self.repair = repair
        self.processed = 0

    def walk_parameters(self, params: Iterable[Parameter]) -> None:
        for p in params:
            self.walk_schema("", p.schema_)
            for media in p.content.values():
                self.walk_schema("", media.schema_)

    def walk_operation(self, operation: Operation | None) -> None:
        if operation is None:
            return

        self.walk_parameters(operation.parameters)

        if operation.request_body is not None:
            for media in operation.request_body.content.values():
                self.walk_schema("", media.schema_)

        for response in operation.responses.values():
            for media in response.content.values():
                self.walk_schema("", media.schema_)

    def walk_schema(self, name: str, schema: Schema | None) -> None:
        if schema is None or schema.ref:
            return

        for s in schema.all_of:
            self.walk_schema("", s)
        for s in schema.one_of:
            self.walk_schema("", s)

        if schema.type is SchemaType.OBJECT:
            for prop in schema.properties:
                self.walk_schema(prop.name, prop.schema_)

        elif schema.type is SchemaType.ARRAY:
            if schema.items is None:
                logger.info("Array schema %r has no items, calling repair", name)
                self.repair(Defect.MISSING_ITEMS_IN_ARRAY, name, schema)

            # The repair may have installed an item descriptor.
            items = schema.items
            if isinstance(items, SingleItems):
                self.walk_schema("", items.item)
            elif isinstance(items, TupleItems):
                for s in items.items:
                    self.walk_schema("", s)

        else:
            self.processed += 1
            self.process(schema)
