"""OpenAPI document loader.

Reads an OpenAPI 3.x document (YAML or JSON) into the ``Spec`` model.
References are left unresolved.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import Spec


class SpecLoadError(Exception):
    """Raised when a file cannot be loaded as an OpenAPI document."""


def load_spec(file_path: Path) -> Spec:
    """Load an OpenAPI file into a Spec."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"{file_path}: {e}") from e

    if not isinstance(doc, dict) or "openapi" not in doc:
        raise SpecLoadError(f"{file_path}: not an OpenAPI 3.x document")

    try:
        return Spec.model_validate(doc)
    except ValidationError as e:
        raise SpecLoadError(f"{file_path}: {e}") from e
