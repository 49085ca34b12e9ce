"""Signature catalog and classification engine for enumerated devices."""

from .engine import Classifier, classify
from .matching import find_match, matches, normalize
from .signatures import (
    DEFAULT_SIGNATURES,
    SignatureCatalog,
    create_default_catalog,
    load_catalog,
    load_catalog_file,
)

__all__ = [
    # Matching
    "normalize",
    "matches",
    "find_match",
    # Signature Catalog
    "SignatureCatalog",
    "DEFAULT_SIGNATURES",
    "create_default_catalog",
    "load_catalog",
    "load_catalog_file",
    # Classification Engine
    "Classifier",
    "classify",
]
