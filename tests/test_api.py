import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from github_portfolio.api.app import create_app
from github_portfolio.application.activity_checker import ActivityChecker
from github_portfolio.application.portfolio_service import PortfolioService
from github_portfolio.domain.models import UserEvent
from github_portfolio.infrastructure.cache import InMemoryCacheStore

from fakes import FakeGitHubClient, make_summary


def _client_for(github_client: FakeGitHubClient) -> TestClient:
    service = PortfolioService(github_client, InMemoryCacheStore(), username="octocat")
    checker = ActivityChecker(github_client, username="octocat")
    return TestClient(create_app(service, checker, github_client=github_client))


class TestPortfolioEndpoint(unittest.TestCase):
    def test_returns_records_with_camel_case_keys(self) -> None:
        github_client = FakeGitHubClient(repositories=[make_summary(1, "alpha", stars=5)])

        response = _client_for(github_client).get("/portfolio")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body), 1)
        self.assertEqual(set(body[0]), {
            "id", "name", "description", "url", "stars", "languages", "lastCommitDate",
            "lastCommitMessage", "lastCommitAuthor", "pullRequestCount",
        })
        self.assertEqual(body[0]["stars"], 5)
        self.assertEqual(body[0]["languages"], "Python")
        self.assertEqual(body[0]["lastCommitDate"], "2024-01-02T03:04:05Z")
        self.assertEqual(body[0]["pullRequestCount"], 0)

    def test_listing_failure_returns_generic_500(self) -> None:
        github_client = FakeGitHubClient(repositories=RuntimeError("secret internal detail"))

        response = _client_for(github_client).get("/portfolio")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "An error occurred while getting the portfolio"})
        self.assertNotIn("secret", response.text)


class TestSearchEndpoint(unittest.TestCase):
    def test_blank_filters_return_empty_list_without_upstream_call(self) -> None:
        github_client = FakeGitHubClient(search_results=[make_summary(1)])

        response = _client_for(github_client).get("/search", params={"repositoryName": "", "language": " "})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(github_client.calls["search"], 0)

    def test_filters_are_mapped_to_query(self) -> None:
        github_client = FakeGitHubClient(search_results=[make_summary(1), make_summary(2)])

        response = _client_for(github_client).get(
            "/search",
            params={"repositoryName": "foo", "language": "go", "username": "bob", "page": 2, "perPage": 50},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 2)
        # page/perPage are accepted but the upstream search always asks for the first 20
        self.assertEqual(github_client.search_calls, [("foo language:go user:bob", "stars", "desc", 20)])

    def test_invalid_paging_is_rejected(self) -> None:
        response = _client_for(FakeGitHubClient()).get("/search", params={"language": "go", "page": 0})

        self.assertEqual(response.status_code, 422)

    def test_search_failure_returns_generic_500(self) -> None:
        github_client = FakeGitHubClient(search_results=RuntimeError("boom"))

        response = _client_for(github_client).get("/search", params={"language": "go"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "An error occurred while searching repositories"})


class TestActivityEndpoint(unittest.TestCase):
    def test_reports_recent_activity(self) -> None:
        since = datetime(2025, 1, 1, tzinfo=timezone.utc)
        github_client = FakeGitHubClient(
            events=[UserEvent(id="1", type="PushEvent", created_at=since + timedelta(hours=1))]
        )

        response = _client_for(github_client).get("/activity", params={"since": "2025-01-01T00:00:00Z"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"hasActivity": True})

    def test_upstream_failure_reports_no_activity(self) -> None:
        github_client = FakeGitHubClient(events=RuntimeError("boom"))

        response = _client_for(github_client).get("/activity", params={"since": "2025-01-01T00:00:00Z"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"hasActivity": False})


class TestLifecycle(unittest.TestCase):
    def test_health(self) -> None:
        response = _client_for(FakeGitHubClient()).get("/health")
        self.assertEqual(response.json(), {"status": "ok"})

    def test_github_client_is_closed_on_shutdown(self) -> None:
        github_client = FakeGitHubClient()

        with _client_for(github_client) as client:
            client.get("/health")

        self.assertTrue(github_client.closed)

    def test_docs_disabled_by_default(self) -> None:
        self.assertEqual(_client_for(FakeGitHubClient()).get("/docs").status_code, 404)
