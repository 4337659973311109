import pytest

from api_schema_walker.parser.base import Schema, SchemaType, SingleItems, Spec
from api_schema_walker.walker import (
    Defect,
    SchemaDefectError,
    WalkerUsageError,
    free_form_items,
    walk_all_schemas,
)


def _leaf(tag: str, kind: str = "string") -> dict:
    return {"type": kind, "format": tag}


def _media(tag: str) -> dict:
    return {"application/json": {"schema": _leaf(tag)}}


def _walk(spec: Spec, repair=None) -> list[str]:
    seen = []
    walk_all_schemas(spec, lambda s: seen.append(s.format), repair)
    return seen


def _components(**schemas) -> Spec:
    return Spec.model_validate({"components": {"schemas": schemas}})


class TestTraversalOrder:
    def test_full_order(self):
        spec = Spec.model_validate({
            "paths": {
                "/a": {
                    "parameters": [{"name": "p", "schema": _leaf("path-param"), "content": _media("path-param-content")}],
                    # Declared out of slot order on purpose.
                    "trace": {"requestBody": {"content": _media("trace-body")}},
                    "post": {"requestBody": {"content": _media("post-body")}},
                    "get": {
                        "parameters": [{"name": "q", "schema": _leaf("get-param")}],
                        "requestBody": {"content": _media("get-body")},
                        "responses": {
                            "200": {"content": _media("get-200")},
                            "default": {"content": _media("get-default")},
                        },
                    },
                    "put": {"responses": {"204": {"content": _media("put-204")}}},
                },
                "/b": {"delete": {"parameters": [{"name": "id", "schema": _leaf("b-delete")}]}},
            },
            "components": {
                "parameters": {"P": {"name": "p", "schema": _leaf("comp-param", "integer")}},
                "schemas": {
                    "S": {"type": "object", "properties": {"b": _leaf("s-b"), "a": _leaf("s-a")}},
                },
            },
        })
        assert _walk(spec) == [
            "path-param",
            "path-param-content",
            "get-param",
            "get-body",
            "get-200",
            "get-default",
            "put-204",
            "post-body",
            "trace-body",
            "b-delete",
            "comp-param",
            "s-b",
            "s-a",
        ]

    def test_composition_before_type_branch(self):
        spec = _components(S={
            "type": "object",
            "allOf": [_leaf("all-0"), _leaf("all-1")],
            "oneOf": [_leaf("one-0")],
            "properties": {"p": _leaf("prop")},
        })
        assert _walk(spec) == ["all-0", "all-1", "one-0", "prop"]

    def test_untyped_composition_parent_is_primitive(self):
        spec = _components(S={"allOf": [_leaf("branch")], "format": "parent"})
        assert _walk(spec) == ["branch", "parent"]

    def test_single_and_tuple_items(self):
        spec = _components(
            A={"type": "array", "items": _leaf("single")},
            T={"type": "array", "items": [_leaf("t0"), _leaf("t1", "integer")]},
        )
        assert _walk(spec) == ["single", "t0", "t1"]

    def test_nested_objects(self):
        spec = _components(S={
            "type": "object",
            "properties": {
                "inner": {"type": "object", "properties": {"x": _leaf("x"), "y": _leaf("y")}},
                "list": {"type": "array", "items": {"type": "object", "properties": {"z": _leaf("z")}}},
            },
        })
        assert _walk(spec) == ["x", "y", "z"]

    def test_walk_is_repeatable(self):
        spec = _components(S={"type": "object", "properties": {"a": _leaf("a"), "b": _leaf("b")}})
        assert _walk(spec) == _walk(spec)


class TestLeaves:
    def test_never_processes_composites(self):
        spec = _components(S={
            "type": "object",
            "properties": {
                "a": {"type": "array", "items": {"type": "object", "properties": {"n": {"type": "number"}}}},
                "b": {"type": "boolean"},
                "c": {"type": "integer"},
                "d": {},
            },
        })
        kinds = []
        walk_all_schemas(spec, lambda s: kinds.append(s.type))
        assert kinds == [SchemaType.NUMBER, SchemaType.BOOLEAN, SchemaType.INTEGER, SchemaType.ANY]

    def test_refs_are_opaque(self):
        spec = Spec.model_validate({
            "paths": {
                "/pets": {
                    "get": {
                        "responses": {
                            "200": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Name", "type": "string"}}}},
                        },
                    },
                    "post": {"requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Name"}}}}},
                },
            },
            "components": {"schemas": {"Name": _leaf("name")}},
        })
        assert _walk(spec) == ["name"]

    def test_self_reference_terminates(self):
        spec = _components(Node={
            "type": "object",
            "properties": {
                "value": _leaf("value"),
                "next": {"$ref": "#/components/schemas/Node"},
                "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
            },
        })
        assert _walk(spec) == ["value"]

    def test_empty_spec(self):
        assert _walk(Spec()) == []


class TestRepair:
    def _spec(self) -> Spec:
        return _components(S={
            "type": "object",
            "properties": {
                "before": _leaf("before"),
                "tags": {"type": "array"},
                "after": _leaf("after"),
            },
        })

    def test_default_repair_raises_defect(self):
        with pytest.raises(SchemaDefectError) as exc_info:
            _walk(self._spec())
        assert exc_info.value.defect is Defect.MISSING_ITEMS_IN_ARRAY
        assert exc_info.value.name == "tags"
        assert exc_info.value.schema.type is SchemaType.ARRAY
        assert "missing items in array" in str(exc_info.value)

    def test_tolerating_repair_skips_items(self):
        calls = []

        def repair(defect, name, schema):
            calls.append((defect, name, schema.type))

        assert _walk(self._spec(), repair) == ["before", "after"]
        assert calls == [(Defect.MISSING_ITEMS_IN_ARRAY, "tags", SchemaType.ARRAY)]

    def test_repair_error_aborts_walk(self):
        err = RuntimeError("no arrays without items")
        seen = []

        def repair(defect, name, schema):
            raise err

        with pytest.raises(RuntimeError) as exc_info:
            walk_all_schemas(self._spec(), lambda s: seen.append(s.format), repair)
        assert exc_info.value is err
        assert seen == ["before"]

    def test_repair_can_install_items(self):
        spec = self._spec()
        kinds = []
        walk_all_schemas(spec, lambda s: kinds.append(s.type), free_form_items)
        assert kinds == [SchemaType.STRING, SchemaType.ANY, SchemaType.STRING]
        tags = spec.components.schemas["S"].properties[1].schema_
        assert isinstance(tags.items, SingleItems)

    def test_name_is_cleared_below_array(self):
        spec = _components(S={
            "type": "object",
            "properties": {"outer": {"type": "array", "items": {"type": "array"}}},
        })
        names = []
        walk_all_schemas(spec, lambda s: None, lambda defect, name, schema: names.append(name))
        assert names == [""]

    def test_name_is_empty_for_root_schema(self):
        spec = _components(S={"type": "array"})
        names = []
        walk_all_schemas(spec, lambda s: None, lambda defect, name, schema: names.append(name))
        assert names == [""]


class TestErrors:
    def test_process_is_required(self):
        with pytest.raises(WalkerUsageError):
            walk_all_schemas(Spec(), None)

    def test_process_is_checked_before_walking(self):
        calls = []
        spec = _components(S={"type": "array"})
        with pytest.raises(WalkerUsageError):
            walk_all_schemas(spec, None, lambda *args: calls.append(args))
        assert calls == []

    def test_process_error_stops_walk(self):
        spec = _components(A=_leaf("a"), B=_leaf("b"), C=_leaf("c"))
        seen = []

        def process(schema: Schema):
            seen.append(schema.format)
            if schema.format == "b":
                raise ValueError("stop")

        with pytest.raises(ValueError, match="stop"):
            walk_all_schemas(spec, process)
        assert seen == ["a", "b"]
