"""Tests for the crawl HTTP endpoint."""

import unittest
from dataclasses import replace

from fastapi.testclient import TestClient

from sitecrawl.controller import CrawlController
from sitecrawl.server import create_app

from helpers import FakeFetcher, article_page

PAGES = {"https://example.com/blog": article_page("Welcome", author="Jane Doe")}


class TestCrawlEndpoint(unittest.TestCase):
    """Verify preflight, success and error responses."""

    def setUp(self):
        self.configs = []

        def factory(config):
            self.configs.append(config)
            return CrawlController(replace(config, respect_robots=False), fetcher=FakeFetcher(PAGES))

        self.client = TestClient(create_app(controller_factory=factory))

    def test_preflight(self):
        """OPTIONS answers "ok" with CORS headers and starts no crawl."""
        response = self.client.options("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "ok")
        self.assertEqual(response.headers["access-control-allow-origin"], "*")
        self.assertEqual(self.configs, [])

    def test_crawl_success(self):
        for path in ("/", "/crawl"):
            with self.subTest(path=path):
                response = self.client.post(
                    path,
                    json={"config": {"targetUrl": "https://example.com/blog", "maxPages": 5, "delayMs": 0}},
                )
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.headers["access-control-allow-origin"], "*")
                body = response.json()
                self.assertEqual(body["team_id"], "example_com")
                self.assertEqual(len(body["items"]), 1)
                self.assertEqual(body["items"][0]["content_type"], "blog")
                self.assertEqual(body["items"][0]["author"], "Jane Doe")
        self.assertEqual(self.configs[0].max_pages, 5)
        self.assertEqual(self.configs[0].delay_seconds, 0.0)

    def test_invalid_seed(self):
        response = self.client.post("/", json={"config": {"targetUrl": "ftp://example.com/"}})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertIn("Invalid target URL", body["error"])
        self.assertEqual(body["team_id"], "error")
        self.assertEqual(body["items"], [])
        self.assertEqual(self.configs, [])

    def test_missing_config(self):
        response = self.client.post("/", json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["team_id"], "error")

    def test_malformed_json(self):
        response = self.client.post("/", content=b"{not json", headers={"content-type": "application/json"})
        self.assertEqual(response.status_code, 400)

    def test_unexpected_failure_is_500(self):
        def factory(config):
            raise RuntimeError("boom")

        client = TestClient(create_app(controller_factory=factory))
        response = client.post("/", json={"config": {"targetUrl": "https://example.com/"}})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "boom", "team_id": "error", "items": []})


if __name__ == "__main__":
    unittest.main()
