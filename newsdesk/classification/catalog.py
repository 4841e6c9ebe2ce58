"""Category label catalog."""

from typing import Dict, List

from pydantic import BaseModel, Field

from .tables import ClassifierTables


class CategoryLabel(BaseModel):
    """Display metadata for a category key."""

    key: str = Field(..., description="Category key")
    title: str = Field(..., description="Display title")
    description: str = Field("", description="Display description")


class CategoryCatalog:
    """Maps category keys to display metadata and stock search terms."""

    def __init__(self, tables: ClassifierTables) -> None:
        self.tables = tables

    @property
    def keys(self) -> List[str]:
        return list(self.tables.categories)

    def __contains__(self, key: str) -> bool:
        return key in self.tables.categories

    def label(self, key: str) -> CategoryLabel:
        """Label for key; unknown keys get the fallback category's label."""
        spec_key = key if key in self.tables.categories else self.tables.default_category
        spec = self.tables.categories[spec_key]
        return CategoryLabel(key=spec_key, title=spec.label, description=spec.description)

    def labels(self) -> Dict[str, CategoryLabel]:
        return {key: self.label(key) for key in self.tables.categories}

    def search_term(self, categories: List[str]) -> str:
        """Stock-photo query for the first category, or the fallback's term."""
        fallback = self.tables.categories[self.tables.default_category].search_term
        if not categories:
            return fallback
        spec = self.tables.categories.get(categories[0])
        return spec.search_term if spec and spec.search_term else fallback
