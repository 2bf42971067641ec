from typing import List

from github_portfolio.domain.models import SearchFilter


def build_search_query(search_filter: SearchFilter) -> str:
    """
    Builds a GitHub repository search query from the given filter.

    Parts are emitted in a fixed order: name fragment, language qualifier, user qualifier.
    An empty filter yields an empty string.
    """
    parts: List[str] = []

    if search_filter.repository_name and search_filter.repository_name.strip():
        parts.append(search_filter.repository_name.strip())

    if search_filter.language and search_filter.language.strip():
        parts.append(f"language:{search_filter.language.strip()}")

    if search_filter.username and search_filter.username.strip():
        parts.append(f"user:{search_filter.username.strip()}")

    return " ".join(parts)
