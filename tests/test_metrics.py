"""Tests for the MetricsCollector class."""

import unittest

from sitecrawl.metrics import MetricsCollector
from sitecrawl.models import ExtractedItem, PageEvent


def _make_event(**overrides) -> PageEvent:
    """Helper to build a PageEvent with sensible defaults."""
    defaults = dict(
        kind="extracted",
        url="https://example.com/",
        depth=0,
        processed=1,
        queued=0,
        latency_ms=100,
        item=None,
        error_type=None,
    )
    defaults.update(overrides)
    return PageEvent(**defaults)


class TestMetricsCollector(unittest.TestCase):
    """Verify event recording and snapshot aggregation."""

    def test_empty_snapshot(self):
        """Snapshot with no events should have all zeros."""
        snap = MetricsCollector().snapshot()
        self.assertEqual(snap.pages_processed, 0)
        self.assertEqual(snap.items_extracted, 0)
        self.assertEqual(snap.avg_latency_ms, 0.0)

    def test_counts_by_kind(self):
        """Each event kind should land in its own counter."""
        metrics = MetricsCollector()
        metrics(_make_event(kind="extracted"))
        metrics(_make_event(kind="extracted"))
        metrics(_make_event(kind="listing"))
        metrics(_make_event(kind="skipped", error_type="ContentTooShort"))
        metrics(_make_event(kind="failed", error_type="FetchFailure"))
        snap = metrics.snapshot()
        self.assertEqual(snap.pages_processed, 5)
        self.assertEqual(snap.items_extracted, 2)
        self.assertEqual(snap.listing_pages, 1)
        self.assertEqual(snap.skipped, 1)
        self.assertEqual(snap.failures, 1)

    def test_placeholder_counts_as_item(self):
        """A placeholder stands in for an item and is counted as one."""
        metrics = MetricsCollector()
        item = ExtractedItem(title="t", content="c", content_type="documentation", source_url="https://example.com/")
        metrics.record(_make_event(kind="placeholder", item=item))
        self.assertEqual(metrics.snapshot().items_extracted, 1)

    def test_average_latency_ignores_failures(self):
        """Average latency should be computed over fetched pages only."""
        metrics = MetricsCollector()
        metrics.record(_make_event(latency_ms=100))
        metrics.record(_make_event(latency_ms=200))
        metrics.record(_make_event(kind="failed", latency_ms=9000))
        self.assertAlmostEqual(metrics.snapshot().avg_latency_ms, 150.0)

    def test_export_json(self):
        """export_json should return all recorded events as dicts."""
        metrics = MetricsCollector()
        metrics.record(_make_event())
        exported = metrics.export_json()
        self.assertEqual(len(exported), 1)
        self.assertEqual(exported[0]["kind"], "extracted")
        self.assertIn("url", exported[0])


if __name__ == "__main__":
    unittest.main()
