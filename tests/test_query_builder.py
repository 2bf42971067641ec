import unittest

from github_portfolio.application.query_builder import build_search_query
from github_portfolio.domain.models import SearchFilter


class TestBuildSearchQuery(unittest.TestCase):
    def test_all_parts_in_fixed_order(self) -> None:
        search_filter = SearchFilter(repository_name="foo", language="go", username="bob")

        self.assertEqual(build_search_query(search_filter), "foo language:go user:bob")

    def test_empty_filter_yields_empty_query(self) -> None:
        search_filter = SearchFilter(repository_name=None, language=None, username=None)

        self.assertEqual(build_search_query(search_filter), "")
        self.assertTrue(search_filter.is_empty)

    def test_language_only(self) -> None:
        self.assertEqual(build_search_query(SearchFilter(language="rust")), "language:rust")

    def test_name_and_user_without_language(self) -> None:
        search_filter = SearchFilter(repository_name="crawler", username="octocat")

        self.assertEqual(build_search_query(search_filter), "crawler user:octocat")

    def test_blank_values_are_ignored(self) -> None:
        search_filter = SearchFilter(repository_name="   ", language="", username=" bob ")

        self.assertEqual(build_search_query(search_filter), "user:bob")
        self.assertFalse(search_filter.is_empty)

    def test_whitespace_only_filter_is_empty(self) -> None:
        self.assertTrue(SearchFilter(repository_name=" ", language="\t").is_empty)
