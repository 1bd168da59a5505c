"""Search provider collaborators."""

import os
from typing import Optional

from rehome.search.regex_provider import RegexSearchProvider
from rehome.search.ripgrep import RipgrepSearchProvider
from rehome.search.types import RawMatch, SearchProvider, SearchScope


def get_provider(name: Optional[str] = None) -> SearchProvider:
    """
    Return a search provider by name ("regex" or "ripgrep").

    Defaults to the REHOME_SEARCH environment variable, then "regex".
    """
    name = (name or os.environ.get("REHOME_SEARCH", "regex")).lower()
    if name in ("rg", "ripgrep"):
        return RipgrepSearchProvider()
    if name == "regex":
        return RegexSearchProvider()
    raise ValueError(f"Unknown search provider: {name}")


__all__ = [
    "RawMatch",
    "RegexSearchProvider",
    "RipgrepSearchProvider",
    "SearchProvider",
    "SearchScope",
    "get_provider",
]
