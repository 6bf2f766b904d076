"""Tests for the Frontier queue and URL canonicalization."""

import unittest

from sitecrawl.frontier import Frontier, canonicalize_url
from sitecrawl.models import FrontierEntry


def _urls(frontier):
    return [e.url for e in frontier]


class TestCanonicalizeUrl(unittest.TestCase):
    """Verify equivalent URLs collapse to one key."""

    def test_lowercases_host_sorts_query_and_drops_fragment(self):
        url = "HTTPS://Example.COM/docs?b=2&a=1&utm_source=news#intro"
        self.assertEqual(canonicalize_url(url), "https://example.com/docs?a=1&b=2")

    def test_empty_path_becomes_root(self):
        self.assertEqual(canonicalize_url("https://example.com"), "https://example.com/")

    def test_path_case_is_preserved(self):
        self.assertEqual(canonicalize_url("https://example.com/Blog/Post"), "https://example.com/Blog/Post")


class TestFrontierOrdering(unittest.TestCase):
    """Verify FIFO order with a priority head."""

    def test_pop_is_fifo(self):
        frontier = Frontier()
        frontier.push(FrontierEntry("https://example.com/a"))
        frontier.push(FrontierEntry("https://example.com/b"))
        self.assertEqual(frontier.pop().url, "https://example.com/a")
        self.assertEqual(frontier.pop().url, "https://example.com/b")

    def test_pop_returns_none_when_drained(self):
        self.assertIsNone(Frontier().pop())

    def test_priority_batch_goes_first_in_discovery_order(self):
        """A priority batch lands ahead of tail entries, keeping its own order."""
        frontier = Frontier()
        frontier.push(FrontierEntry("https://example.com/a"))
        frontier.push(FrontierEntry("https://example.com/b"))
        frontier.push_many(
            [FrontierEntry("https://example.com/x"), FrontierEntry("https://example.com/y")],
            priority=True,
        )
        self.assertEqual(
            _urls(frontier),
            [
                "https://example.com/x",
                "https://example.com/y",
                "https://example.com/a",
                "https://example.com/b",
            ],
        )


class TestFrontierDedup(unittest.TestCase):
    """Verify visited and queued URLs are not enqueued again."""

    def test_visited_url_is_rejected(self):
        frontier = Frontier()
        frontier.mark_visited("https://example.com/a#section")
        self.assertTrue(frontier.is_visited("https://EXAMPLE.com/a"))
        self.assertFalse(frontier.push(FrontierEntry("https://example.com/a")))
        self.assertEqual(len(frontier), 0)

    def test_queued_url_is_not_duplicated_at_tail(self):
        frontier = Frontier()
        self.assertTrue(frontier.push(FrontierEntry("https://example.com/a")))
        self.assertFalse(frontier.push(FrontierEntry("https://example.com/a?utm_medium=x")))
        self.assertEqual(len(frontier), 1)

    def test_entries_deeper_than_max_depth_are_never_created(self):
        frontier = Frontier(max_depth=1)
        self.assertTrue(frontier.push(FrontierEntry("https://example.com/a", depth=1)))
        self.assertFalse(frontier.push(FrontierEntry("https://example.com/b", depth=2)))
        self.assertTrue(all(e.depth <= 1 for e in frontier))

    def test_popped_url_leaves_queued_set(self):
        """Once popped, a URL is kept out by the visited set alone."""
        frontier = Frontier()
        frontier.push(FrontierEntry("https://example.com/a"))
        frontier.pop()
        self.assertEqual(frontier._queued, set())
        frontier.mark_visited("https://example.com/a")
        self.assertFalse(frontier.push(FrontierEntry("https://example.com/a")))
        self.assertEqual(len(frontier), 0)

    def test_push_many_returns_accepted_count(self):
        frontier = Frontier()
        frontier.mark_visited("https://example.com/a")
        accepted = frontier.push_many(
            [FrontierEntry("https://example.com/a"), FrontierEntry("https://example.com/b")]
        )
        self.assertEqual(accepted, 1)


if __name__ == "__main__":
    unittest.main()
