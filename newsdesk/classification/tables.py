"""Immutable keyword and category tables."""

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class CategorySpec(BaseModel):
    """One category: how it is matched and how it is shown."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["location", "topic", "fallback"] = Field(..., description="Match scope")
    label: str = Field(..., description="Display title")
    description: str = Field("", description="Display description")
    search_term: str = Field("", description="Stock photo search query")
    keywords: Tuple[str, ...] = Field(default_factory=tuple, description="Substring keywords")


class ClassifierTables(BaseModel):
    """Static tables consumed by the classifier, catalog and stock search."""

    model_config = ConfigDict(frozen=True)

    language: str = Field("mr", description="Target language tag")
    script_range: Tuple[int, int] = Field((0x0900, 0x097F), description="Inclusive code point range")
    min_script_chars: int = Field(10, ge=0)
    min_script_ratio: float = Field(0.3, ge=0.0, le=1.0)
    snippet_chars: int = Field(200, ge=0, description="Description prefix used for location matching")
    block_threshold: int = Field(2, ge=1, description="Distinct blocked keywords needed to block")
    default_category: str = Field("general")
    allowed_keywords: Tuple[str, ...] = Field(default_factory=tuple)
    blocked_keywords: Tuple[str, ...] = Field(default_factory=tuple)
    categories: Dict[str, CategorySpec] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_default_category(self) -> "ClassifierTables":
        """The fallback category must be part of the catalog."""
        if self.default_category not in self.categories:
            raise ValueError(f"Default category '{self.default_category}' is not defined")
        low, high = self.script_range
        if low > high:
            raise ValueError(f"Invalid script range {self.script_range}")
        return self

    def keys_of_kind(self, kind: str) -> Tuple[str, ...]:
        """Category keys of one kind, in table order."""
        return tuple(key for key, spec in self.categories.items() if spec.kind == kind)


def load_classifier_tables(path: Optional[Path] = None) -> ClassifierTables:
    """Load tables from YAML; the packaged Marathi tables by default."""
    try:
        if path is None:
            raw = resources.files("newsdesk.data").joinpath("categories.yaml").read_text(encoding="utf-8")
        else:
            if not path.exists():
                raise FileNotFoundError(f"Category tables not found: {path}")
            raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw) or {}
        return ClassifierTables(**data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in category tables: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid category tables: {e}")


@lru_cache(maxsize=1)
def default_tables() -> ClassifierTables:
    """Packaged tables, loaded once per process."""
    return load_classifier_tables()
