from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SearchSource(str, Enum):
    """Search engine a result came from."""

    DUCKDUCKGO = "duckduckgo"
    EXA = "exa"


@dataclass(frozen=True)
class SearchResult:
    title: str
    url: str
    snippet: str = ""
    source: SearchSource = SearchSource.DUCKDUCKGO

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResult":
        return cls(
            title=data["title"],
            url=data["url"],
            snippet=data.get("snippet", ""),
            source=SearchSource(data.get("source", SearchSource.DUCKDUCKGO.value)),
        )


@dataclass
class ProfileLinks:
    linkedin: str | None = None
    twitter: str | None = None
    website: str | None = None
    email: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class PersonProfile:
    """
    Person profile assembled from search snippets.

    Scalar fields are first-write-wins; ``links`` is a merged map.
    """

    name: str | None = None
    title: str | None = None
    company: str | None = None
    bio: str | None = None
    skills: list[str] | None = None
    links: ProfileLinks = field(default_factory=ProfileLinks)

    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key in ("name", "title", "company", "bio", "skills"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        links = self.links.to_dict()
        if links:
            data["links"] = links
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PersonProfile":
        data = data or {}
        links = data.get("links") or {}
        return cls(
            name=data.get("name"),
            title=data.get("title"),
            company=data.get("company"),
            bio=data.get("bio"),
            skills=list(data["skills"]) if data.get("skills") is not None else None,
            links=ProfileLinks(
                linkedin=links.get("linkedin"),
                twitter=links.get("twitter"),
                website=links.get("website"),
                email=links.get("email"),
            ),
        )


@dataclass(frozen=True)
class SearchDebug:
    tools_count: int = 0
    tool_calls_count: int = 0
    tool_results_count: int = 0


@dataclass(frozen=True)
class AggregatedResults:
    """Raw output of one aggregator run."""

    results: list[SearchResult]
    debug: SearchDebug = field(default_factory=SearchDebug)


@dataclass(frozen=True)
class SearchOutcome:
    query: str
    summary: str
    results: list[SearchResult]
    profile: PersonProfile | None = None
    debug: SearchDebug = field(default_factory=SearchDebug)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "results": [r.to_dict() for r in self.results],
            "query": self.query,
            "profile": self.profile.to_dict() if self.profile else None,
            "debug": {
                "toolsCount": self.debug.tools_count,
                "toolCallsCount": self.debug.tool_calls_count,
                "toolResultsCount": self.debug.tool_results_count,
            },
        }
