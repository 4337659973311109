from decimal import Decimal
from pathlib import Path

import pytest

from api_schema_walker.parser.base import SchemaType
from api_schema_walker.parser.openapi import SpecLoadError, load_spec

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadSpec:
    def test_load_petstore_paths(self):
        spec = load_spec(FIXTURES / "petstore.yaml")
        assert list(spec.paths) == ["/pets", "/pets/{petId}"]

    def test_load_operations(self):
        spec = load_spec(FIXTURES / "petstore.yaml")
        pets = spec.paths["/pets"]
        assert pets.get.parameters[0].schema_.maximum == 100
        assert pets.post.request_body is not None
        assert list(pets.post.responses) == ["201"]
        assert pets.delete is None

    def test_load_components(self):
        spec = load_spec(FIXTURES / "petstore.yaml")
        pet = spec.components.schemas["Pet"]
        assert [p.name for p in pet.properties] == ["id", "name", "weight", "tags"]
        assert pet.properties[2].schema_.multiple_of == Decimal("0.1")
        assert pet.properties[3].schema_.type is SchemaType.ARRAY
        assert pet.properties[3].schema_.items is None
        assert spec.components.parameters["PageSize"].schema_.exclusive_maximum is True

    def test_not_openapi(self, tmp_path):
        f = tmp_path / "doc.md"
        f.write_text("# API Docs\nSome text")
        with pytest.raises(SpecLoadError):
            load_spec(f)

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("openapi: [invalid\n")
        with pytest.raises(SpecLoadError):
            load_spec(f)

    def test_invalid_schema_type(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("openapi: 3.0.0\ncomponents:\n  schemas:\n    X:\n      type: matrix\n")
        with pytest.raises(SpecLoadError):
            load_spec(f)
