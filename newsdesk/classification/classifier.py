"""Language, topic and category classification of feed items."""

from typing import List, Tuple

from pydantic import BaseModel, Field

from .tables import ClassifierTables


class Classification(BaseModel):
    """Outcome of classifying one item."""

    is_target_language: bool = Field(..., description="Passes the script-proportion test")
    categories: List[str] = Field(..., description="Matched category keys, never empty")
    blocked: bool = Field(False, description="Enough distinct blocked keywords found")
    on_topic: bool = Field(False, description="At least one allowed keyword found")
    blocked_keywords: List[str] = Field(default_factory=list, description="Distinct blocked keywords found")


class ContentClassifier:
    """Pure classification over static tables.

    The blocked signal is advisory: callers decide whether to act on it.
    """

    def __init__(self, tables: ClassifierTables) -> None:
        self.tables = tables
        self._low, self._high = tables.script_range
        self._location_keys = tables.keys_of_kind("location")
        self._topic_keys = tables.keys_of_kind("topic")

    def script_stats(self, text: str) -> Tuple[int, float]:
        """Count of target-script characters and their share of the text."""
        if not text:
            return 0, 0.0
        count = sum(1 for ch in text if self._low <= ord(ch) <= self._high)
        return count, count / len(text)

    def is_target_language(self, text: str) -> bool:
        """Both the absolute floor and the proportion must hold."""
        count, ratio = self.script_stats(text)
        return count >= self.tables.min_script_chars and ratio >= self.tables.min_script_ratio

    def detect_categories(self, title: str = "", description: str = "") -> List[str]:
        """All matching categories; the fallback category when nothing matches.

        Locations match against the title plus the start of the description,
        topics against the title only.
        """
        title = title or ""
        description = description or ""
        if not title and not description:
            return [self.tables.default_category]

        title_lower = title.lower()
        snippet_lower = f"{title} {description[: self.tables.snippet_chars]}".lower()

        matched = []
        for key in self._location_keys:
            if self._matches(key, snippet_lower):
                matched.append(key)
        for key in self._topic_keys:
            if self._matches(key, title_lower):
                matched.append(key)

        return matched or [self.tables.default_category]

    def _matches(self, key: str, haystack: str) -> bool:
        return any(kw.lower() in haystack for kw in self.tables.categories[key].keywords)

    def blocked_matches(self, text: str) -> List[str]:
        """Distinct blocked keywords present in text."""
        return [kw for kw in self.tables.blocked_keywords if kw in text]

    def is_blocked(self, text: str) -> bool:
        return len(self.blocked_matches(text)) >= self.tables.block_threshold

    def is_on_topic(self, text: str) -> bool:
        return any(kw in text for kw in self.tables.allowed_keywords)

    def classify(self, title: str, description: str) -> Classification:
        """Classify an item from its title and plain-text description."""
        combined = f"{title or ''} {description or ''}".strip()
        found = self.blocked_matches(combined)
        return Classification(
            is_target_language=self.is_target_language(combined),
            categories=self.detect_categories(title, description),
            blocked=len(found) >= self.tables.block_threshold,
            on_topic=self.is_on_topic(combined),
            blocked_keywords=found,
        )
