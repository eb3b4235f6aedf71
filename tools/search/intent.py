"""Person-lookup intent detection and search prompt construction."""

import re

PERSON_LOOKUP_PATTERN = re.compile(
    r"(?:tell me about|who is|information about|research|profile).+", re.IGNORECASE
)

PERSON_FOCUS_AREAS = (
    "Professional background and current role",
    "Company/organization details",
    "Educational background",
    "Notable achievements and projects",
    "Social media and professional profiles",
    "Contact information if publicly available",
    "Recent news or mentions",
)


def is_person_lookup(query: str) -> bool:
    """
    Detect whether the query asks for a person profile rather than a generic answer.

    Examples:
        >>> is_person_lookup("Tell me about Jane Doe")
        True
        >>> is_person_lookup("best pizza in Naples")
        False
    """
    return bool(PERSON_LOOKUP_PATTERN.search(query))


def build_search_prompt(query: str, person_lookup: bool) -> str:
    """Directive that tells the model to use both search tools."""
    if not person_lookup:
        return (
            f"Search for information about: {query}. "
            "Use both DuckDuckGo and Exa search tools to get comprehensive results."
        )

    focus = "\n".join(f"- {area}" for area in PERSON_FOCUS_AREAS)
    return (
        f"Search for comprehensive information about: {query}.\n"
        f"Focus on finding:\n{focus}\n"
        "Use both DuckDuckGo and Exa search tools to get the most comprehensive results."
    )
