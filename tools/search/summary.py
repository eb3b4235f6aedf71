"""One-line synopsis of a search outcome."""

from typing import Sequence

from models.search import PersonProfile, SearchResult


def build_summary(
    query: str,
    results: Sequence[SearchResult],
    profile: PersonProfile | None = None,
    person_lookup: bool = False,
) -> str:
    if not results:
        return f'No results found for "{query}". Please try a different search term.'

    if person_lookup and profile is not None and profile.name:
        summary = f"Found comprehensive information about {profile.name}"
        if profile.title:
            summary += f", {profile.title}"
        if profile.company:
            summary += f" at {profile.company}"
        return summary + "."

    noun = "result" if len(results) == 1 else "results"
    return f'Found {len(results)} {noun} for "{query}".'
