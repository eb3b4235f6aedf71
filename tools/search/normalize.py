"""Normalization of heterogeneous tool-call results into SearchResult objects."""

import json
from collections.abc import Mapping
from typing import Any

from models.search import SearchResult, SearchSource

SNIPPET_FIELDS = ("snippet", "body", "text", "abstract", "description")
RESULT_LIST_FIELDS = ("organic_results", "results")


def decode_tool_content(tool_result: Any) -> Any:
    """
    Single decode-or-pass-through step for a tool result.

    A mapping with a ``content`` key (tool message shape) yields its content.
    Strings are JSON-decoded when possible and returned unchanged otherwise;
    anything else passes through untouched.
    """
    content = tool_result
    if isinstance(tool_result, Mapping) and "content" in tool_result:
        content = tool_result["content"]

    if isinstance(content, (str, bytes)):
        try:
            return json.loads(content)
        except ValueError:
            return content
    return content


def extract_raw_results(content: Any) -> list[Any]:
    """Locate the organic result list inside a decoded tool payload."""
    if not isinstance(content, Mapping):
        return []

    data = content.get("data")
    candidates = []
    if isinstance(data, Mapping):
        response_data = data.get("response_data")
        if isinstance(response_data, Mapping):
            candidates.append(response_data)
        candidates.append(data)
    candidates.append(content)

    for candidate in candidates:
        for key in RESULT_LIST_FIELDS:
            value = candidate.get(key)
            if isinstance(value, list):
                return value
    return []


def source_for_tool(tool_name: str | None) -> SearchSource:
    """Attribute a result to the engine behind the tool that produced it."""
    if tool_name and "EXA" in tool_name.upper():
        return SearchSource.EXA
    return SearchSource.DUCKDUCKGO


def normalize_result(raw: Any, source: SearchSource) -> SearchResult | None:
    """Map one provider record onto SearchResult; None when title or URL is missing."""
    if not isinstance(raw, Mapping):
        return None

    title = raw.get("title")
    url = raw.get("link") or raw.get("url")
    if not title or not url:
        return None

    snippet = ""
    for key in SNIPPET_FIELDS:
        if raw.get(key):
            snippet = str(raw[key])
            break

    return SearchResult(title=str(title), url=str(url), snippet=snippet, source=source)


def normalize_tool_result(
    tool_result: Any, tool_name: str | None = None, limit: int = 5
) -> list[SearchResult]:
    """Decode one tool result and return up to `limit` canonical results."""
    source = source_for_tool(tool_name)
    content = decode_tool_content(tool_result)
    results = []
    for raw in extract_raw_results(content)[:limit]:
        result = normalize_result(raw, source)
        if result is not None:
            results.append(result)
    return results
