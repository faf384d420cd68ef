"""Tests for menu category normalization."""

from types import SimpleNamespace

from apps.web.restaurant.categories import group_by_category, normalize_category


class TestNormalizeCategory:
    """Tests for normalize_category."""

    def test_uppercase_input(self):
        assert normalize_category("APPETIZERS") == "Appetizers"

    def test_lowercase_input(self):
        assert normalize_category("appetizers") == "Appetizers"

    def test_each_word_capitalized(self):
        assert normalize_category("main course") == "Main Course"

    def test_extra_whitespace_collapsed(self):
        assert normalize_category("  main    COURSE  ") == "Main Course"

    def test_empty_string(self):
        assert normalize_category("") == ""

    def test_idempotent(self):
        once = normalize_category("sOUPS and sTEWS")
        assert normalize_category(once) == once == "Soups And Stews"


class TestGroupByCategory:
    """Tests for group_by_category."""

    def test_variants_share_one_group(self):
        """Differently cased categories land under one heading."""
        items = [
            SimpleNamespace(name="Momo", category="APPETIZERS"),
            SimpleNamespace(name="Samosa", category="appetizers"),
        ]

        groups = group_by_category(items)

        assert list(groups) == ["Appetizers"]
        assert [item.name for item in groups["Appetizers"]] == ["Momo", "Samosa"]

    def test_groups_sorted_by_name(self):
        items = [
            SimpleNamespace(name="Lassi", category="drinks"),
            SimpleNamespace(name="Momo", category="Appetizers"),
            SimpleNamespace(name="Dal Bhat", category="Main Course"),
        ]

        assert list(group_by_category(items)) == ["Appetizers", "Drinks", "Main Course"]

    def test_empty_input(self):
        assert group_by_category([]) == {}
