"""Tests for the content classifier."""

import pytest

from newsdesk.classification import ClassifierTables, ContentClassifier, load_classifier_tables
from newsdesk.text import strip_html
from tests.helpers import ENGLISH_DESCRIPTION, ENGLISH_TITLE, MARATHI_DESCRIPTION, MARATHI_TITLE

DEVANAGARI_MA = "म"


class TestLanguageTest:
    """Script count and script proportion must both hold."""

    def test_rejects_short_text_with_high_ratio(self, classifier):
        text = "abcdefgh" + DEVANAGARI_MA * 4
        assert len(text) == 12

        count, ratio = classifier.script_stats(text)

        assert count == 4
        assert ratio >= 0.3
        assert classifier.is_target_language(text) is False

    def test_accepts_enough_script_characters(self, classifier):
        text = "a" * 25 + DEVANAGARI_MA * 15
        assert len(text) == 40

        assert classifier.is_target_language(text) is True

    def test_rejects_many_script_characters_with_low_ratio(self, classifier):
        text = "a" * 80 + DEVANAGARI_MA * 12

        count, ratio = classifier.script_stats(text)

        assert count >= 10
        assert ratio < 0.3
        assert classifier.is_target_language(text) is False

    def test_empty_text_is_rejected(self, classifier):
        assert classifier.script_stats("") == (0, 0.0)
        assert classifier.is_target_language("") is False

    def test_marathi_headline_with_brand_prefix_is_accepted(self, classifier):
        assert classifier.is_target_language(f"IPL 2024: {MARATHI_TITLE}") is True

    def test_english_item_is_rejected(self, classifier):
        result = classifier.classify(ENGLISH_TITLE, ENGLISH_DESCRIPTION)
        assert result.is_target_language is False


class TestBlocklist:
    def test_single_blocked_keyword_is_not_blocked(self, classifier):
        text = "महामार्गावर अपघात, वाहतूक कोंडी"

        assert classifier.blocked_matches(text) == ["अपघात"]
        assert classifier.is_blocked(text) is False

    def test_two_distinct_blocked_keywords_are_blocked(self, classifier):
        text = "अपघातानंतर गोळीबार झाल्याची माहिती"

        assert classifier.is_blocked(text) is True

    def test_repeated_keyword_counts_once(self, classifier):
        text = "अपघात आणि पुन्हा अपघात"
        assert classifier.is_blocked(text) is False

    def test_classify_reports_blocked_keywords(self, classifier):
        result = classifier.classify("अपघात", "गोळीबार")

        assert result.blocked is True
        assert set(result.blocked_keywords) == {"अपघात", "गोळीबार"}

    def test_allowed_keyword_marks_on_topic(self, classifier):
        assert classifier.is_on_topic("राज्य सरकारचा नवा निर्णय") is True
        assert classifier.is_on_topic("पावसाची हजेरी") is False


class TestCategoryDetection:
    def test_location_and_topic_from_title(self, classifier):
        categories = classifier.detect_categories(MARATHI_TITLE, strip_html(MARATHI_DESCRIPTION))
        assert categories == ["pune", "sports"]

    def test_location_from_description_prefix(self, classifier):
        categories = classifier.detect_categories("हवामान अंदाज", "मुंबईत आज मुसळधार पाऊस")
        assert "mumbai" in categories

    def test_location_beyond_snippet_is_ignored(self, classifier):
        description = "अ" * 250 + " नाशिक"
        categories = classifier.detect_categories("हवामान अंदाज", description)
        assert "nashik" not in categories

    def test_topics_match_title_only(self, classifier):
        categories = classifier.detect_categories("हवामान अंदाज", "नवीन चित्रपट प्रदर्शित")
        assert "entertainment" not in categories

    def test_multiple_topics_are_all_kept(self, classifier):
        categories = classifier.detect_categories("क्रिकेट खेळाडू चित्रपटात", "")
        assert "sports" in categories
        assert "entertainment" in categories

    def test_no_match_falls_back_to_general(self, classifier):
        assert classifier.detect_categories("hello world", "") == ["general"]
        assert classifier.detect_categories("", "") == ["general"]

    def test_location_match_is_case_insensitive(self, tables):
        categories = dict(tables.categories)
        categories["pune"] = categories["pune"].model_copy(update={"keywords": ("Pune",)})
        custom = ContentClassifier(tables.model_copy(update={"categories": categories}))

        assert "pune" in custom.detect_categories("Rain in PUNE today", "")


class TestTables:
    def test_packaged_tables_load(self, tables):
        assert tables.language == "mr"
        assert tables.script_range == (0x0900, 0x097F)
        assert tables.keys_of_kind("location")[0] == "pune"
        assert "general" in tables.categories

    def test_tables_are_frozen(self, tables):
        with pytest.raises(Exception):
            tables.min_script_chars = 1

    def test_default_category_must_exist(self):
        with pytest.raises(ValueError):
            ClassifierTables(default_category="missing", categories={})

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_classifier_tables(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("categories: [unclosed", encoding="utf-8")
        with pytest.raises(ValueError):
            load_classifier_tables(path)
