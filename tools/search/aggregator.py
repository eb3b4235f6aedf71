"""Search aggregation through an LLM tool-calling round trip."""

from typing import Sequence

from api.base_client import BaseLLMClient, BaseToolkitClient
from models.errors import ProviderError, SearchError
from models.search import AggregatedResults, SearchDebug, SearchResult
from utils.logger import get_logger

from .intent import build_search_prompt
from .normalize import normalize_tool_result

logger = get_logger(__name__)

MAX_RESULTS_PER_TOOL = 5


class SearchAggregator:
    """
    Issues one tool-enabled completion and collects the search results the
    model's tool calls produced.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        toolkit: BaseToolkitClient,
        tool_slugs: Sequence[str],
        user_id: str,
        model: str | None = None,
        max_tokens: int = 2000,
    ):
        self.llm = llm
        self.toolkit = toolkit
        self.tool_slugs = list(tool_slugs)
        self.user_id = user_id
        self.model = model
        self.max_tokens = max_tokens

    def aggregate(self, query: str, person_lookup: bool) -> AggregatedResults:
        """
        Run the search round trip for a query.

        Raises:
            SearchError: when fetching tools, the completion or tool execution fails
        """
        try:
            tools = self.toolkit.get_tools(self.user_id, self.tool_slugs)

            kwargs = {"max_tokens": self.max_tokens}
            if self.model:
                kwargs["model"] = self.model
            completion = self.llm.get_tool_completion(
                [{"role": "user", "content": build_search_prompt(query, person_lookup)}],
                tools,
                **kwargs,
            )
            tool_names = self.llm.tool_call_names(completion)
            tool_results = self.toolkit.handle_tool_calls(self.user_id, completion)
        except ProviderError as e:
            raise SearchError(str(e)) from e

        results: list[SearchResult] = []
        for index, tool_result in enumerate(tool_results):
            tool_name = tool_names[index] if index < len(tool_names) else None
            try:
                results.extend(
                    normalize_tool_result(tool_result, tool_name, limit=MAX_RESULTS_PER_TOOL)
                )
            except (AttributeError, KeyError, TypeError) as e:
                logger.error(
                    f"Error parsing tool result: {e}",
                    extra={"extra_fields": {"tool": tool_name, "index": index}},
                )

        debug = SearchDebug(
            tools_count=len(tools),
            tool_calls_count=len(tool_names),
            tool_results_count=len(tool_results),
        )
        logger.info(
            f"Aggregated {len(results)} results",
            extra={
                "extra_fields": {
                    "tools_count": debug.tools_count,
                    "tool_calls_count": debug.tool_calls_count,
                    "tool_results_count": debug.tool_results_count,
                }
            },
        )
        return AggregatedResults(results=results, debug=debug)
