"""Schema catalog and validation APIs."""

from .validate import CatalogEntry, load_catalog, schema_path, schemas_root, validate, validate_self

__all__ = [
    "CatalogEntry",
    "load_catalog",
    "schema_path",
    "schemas_root",
    "validate",
    "validate_self",
]
