"""Content classification and the category catalog."""

from .catalog import CategoryCatalog, CategoryLabel
from .classifier import Classification, ContentClassifier
from .tables import CategorySpec, ClassifierTables, default_tables, load_classifier_tables

__all__ = [
    "CategoryCatalog",
    "CategoryLabel",
    "CategorySpec",
    "Classification",
    "ClassifierTables",
    "ContentClassifier",
    "default_tables",
    "load_classifier_tables",
]
