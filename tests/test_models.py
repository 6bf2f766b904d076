"""Tests for data model classes."""

import unittest

from sitecrawl.models import CrawlConfig, CrawlResult, ExtractedItem, FrontierEntry


class TestCrawlConfig(unittest.TestCase):
    """Verify CrawlConfig defaults and immutability."""

    def test_create_config_with_defaults(self):
        """Config should be creatable with just the seed URL."""
        config = CrawlConfig(seed_url="https://example.com")
        self.assertEqual(config.max_pages, 50)
        self.assertEqual(config.max_depth, 3)
        self.assertTrue(config.respect_robots)
        self.assertFalse(config.placeholder_on_failure)

    def test_config_is_immutable(self):
        """Frozen dataclass should raise on attribute assignment."""
        config = CrawlConfig(seed_url="https://example.com")
        with self.assertRaises(AttributeError):
            config.max_pages = 10


class TestFrontierEntry(unittest.TestCase):
    """Verify FrontierEntry defaults."""

    def test_defaults(self):
        entry = FrontierEntry(url="https://example.com/")
        self.assertEqual(entry.depth, 0)
        self.assertFalse(entry.from_listing)


class TestExtractedItem(unittest.TestCase):
    """Verify ExtractedItem creation and wire format."""

    def test_item_is_immutable(self):
        """Items are never mutated after creation."""
        item = ExtractedItem(title="t", content="c", content_type="blog", source_url="https://example.com/")
        with self.assertRaises(AttributeError):
            item.title = "other"

    def test_to_dict_omits_missing_author(self):
        """Unset author and identity should not appear on the wire."""
        item = ExtractedItem(title="t", content="c", content_type="blog", source_url="https://example.com/")
        self.assertEqual(
            item.to_dict(),
            {"title": "t", "content": "c", "content_type": "blog", "source_url": "https://example.com/"},
        )

    def test_to_dict_renders_identity_as_user_id(self):
        """The identity travels under the user_id key."""
        item = ExtractedItem(
            title="t",
            content="c",
            content_type="blog",
            source_url="https://example.com/",
            author="Jane Doe",
            identity_id="user_42",
        )
        data = item.to_dict()
        self.assertEqual(data["author"], "Jane Doe")
        self.assertEqual(data["user_id"], "user_42")


class TestCrawlResult(unittest.TestCase):
    """Verify CrawlResult serialization keeps item order."""

    def test_to_dict_preserves_order(self):
        items = [
            ExtractedItem(title=str(i), content="c", content_type="other", source_url=f"https://example.com/{i}")
            for i in range(3)
        ]
        result = CrawlResult(team_id="example_com", items=items)
        data = result.to_dict()
        self.assertEqual(data["team_id"], "example_com")
        self.assertEqual([i["title"] for i in data["items"]], ["0", "1", "2"])


if __name__ == "__main__":
    unittest.main()
