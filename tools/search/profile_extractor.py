"""
Rule-based person profile extraction from search results.

Each ProfileRule pairs a predicate over a result with the profile field it
fills and an extractor producing the value. Rules run in declaration order
for every result; a rule only fires while its target field is still unset,
so the first matching result wins for every field.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence
from urllib.parse import urlparse

from models.search import PersonProfile, SearchResult

MAX_SKILLS = 5
BIO_MIN_CHARS = 50
BIO_MAX_CHARS = 200

NAME_PATTERN = re.compile(r"([^-]+)\s*-\s*")
HEADLINE_PATTERN = re.compile(r"([^•]+)•")
SKILLS_PATTERN = re.compile(r"(?:skills?|expertise|specializ\w+)[:\s]*([^.!?]+)", re.IGNORECASE)
SKILL_SEPARATORS = re.compile(r"[,&|]")
EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


def _host(url: str) -> str:
    host = urlparse(url if "//" in url else f"//{url}").hostname or ""
    return host.lower()


def _on_domain(url: str, *domains: str) -> bool:
    host = _host(url)
    return any(host == d or host.endswith(f".{d}") for d in domains)


def is_linkedin(result: SearchResult) -> bool:
    return _on_domain(result.url, "linkedin.com")


def is_twitter(result: SearchResult) -> bool:
    return _on_domain(result.url, "twitter.com", "x.com")


def is_personal_site(result: SearchResult) -> bool:
    if is_linkedin(result) or is_twitter(result):
        return False
    title = result.title.lower()
    return (
        "portfolio" in title
        or "personal" in title
        or "personal website" in result.snippet.lower()
    )


def _first_group(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def extract_email(snippet: str) -> str | None:
    match = EMAIL_PATTERN.search(snippet)
    return match.group(0) if match else None


def extract_skills(snippet: str) -> list[str] | None:
    segment = SKILLS_PATTERN.search(snippet)
    if not segment:
        return None
    skills = [s.strip() for s in SKILL_SEPARATORS.split(segment.group(1))]
    skills = [s for s in skills if s][:MAX_SKILLS]
    return skills or None


def extract_bio(snippet: str) -> str | None:
    if len(snippet) <= BIO_MIN_CHARS:
        return None
    if len(snippet) > BIO_MAX_CHARS:
        return snippet[:BIO_MAX_CHARS] + "..."
    return snippet


def _always(result: SearchResult) -> bool:
    return True


@dataclass(frozen=True)
class ProfileRule:
    name: str
    predicate: Callable[[SearchResult], bool]
    field: str  # "name", "skills", "links.linkedin", ...
    extractor: Callable[[SearchResult], object]


DEFAULT_RULES: tuple[ProfileRule, ...] = (
    ProfileRule("linkedin_link", is_linkedin, "links.linkedin", lambda r: r.url),
    ProfileRule("linkedin_name", is_linkedin, "name", lambda r: _first_group(NAME_PATTERN, r.title)),
    ProfileRule(
        "linkedin_title", is_linkedin, "title", lambda r: _first_group(HEADLINE_PATTERN, r.snippet)
    ),
    ProfileRule("twitter_link", is_twitter, "links.twitter", lambda r: r.url),
    ProfileRule("website_link", is_personal_site, "links.website", lambda r: r.url),
    ProfileRule("skills", _always, "skills", lambda r: extract_skills(r.snippet)),
    ProfileRule("bio", _always, "bio", lambda r: extract_bio(r.snippet)),
    ProfileRule("email", _always, "links.email", lambda r: extract_email(r.snippet)),
)


def _target(profile: PersonProfile, field: str):
    if field.startswith("links."):
        return profile.links, field.split(".", 1)[1]
    return profile, field


class ProfileExtractor:
    """Applies an ordered rule list to search results to build a PersonProfile."""

    def __init__(self, rules: Sequence[ProfileRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def apply(self, profile: PersonProfile, result: SearchResult) -> list[str]:
        """Apply every rule to one result; returns the names of rules that fired."""
        fired = []
        for rule in self.rules:
            owner, attr = _target(profile, rule.field)
            if getattr(owner, attr) is not None:
                continue
            if not rule.predicate(result):
                continue
            value = rule.extractor(result)
            if value is None:
                continue
            setattr(owner, attr, value)
            fired.append(rule.name)
        return fired

    def extract(self, results: Iterable[SearchResult]) -> PersonProfile:
        profile = PersonProfile()
        for result in results:
            self.apply(profile, result)
        return profile
