"""Factory for the search pipeline from environment configuration."""

from api.base_client import BaseLLMClient, BaseToolkitClient
from api.factory import create_llm_client, create_toolkit_client
from config.config import Config, get_config
from utils.logger import get_logger

from .aggregator import SearchAggregator
from .cache import SearchCache
from .service import SearchService

logger = get_logger(__name__)

# Singleton cache instance (process-shared)
_cache_instance: SearchCache | None = None


def get_search_cache(config: Config | None = None) -> SearchCache:
    """Process-wide search cache, created on first use."""
    global _cache_instance
    if _cache_instance is None:
        config = config or get_config()
        _cache_instance = SearchCache(
            ttl_seconds=config.SEARCH_CACHE_TTL_SECONDS,
            max_entries=config.SEARCH_CACHE_MAX_ENTRIES,
        )
    return _cache_instance


def create_search_service_from_env(
    llm: BaseLLMClient | None = None,
    toolkit: BaseToolkitClient | None = None,
    config: Config | None = None,
) -> SearchService:
    """
    Create SearchService from environment variables.

    Environment variables:
        OPENAI_API_KEY, COMPOSIO_API_KEY: provider credentials (required)
        SEARCH_MODEL: completion model (default: gpt-4o)
        SEARCH_TOOLS: comma-separated tool slugs
        SEARCH_CACHE_TTL_SECONDS: cache TTL in seconds (default: 300)
        SEARCH_CACHE_MAX_ENTRIES: cache bound (default: 256)

    Raises:
        ValueError: If a provider key is not set
    """
    config = config or get_config()
    aggregator = SearchAggregator(
        llm=llm or create_llm_client(config),
        toolkit=toolkit or create_toolkit_client(config),
        tool_slugs=config.SEARCH_TOOLS,
        user_id=config.SEARCH_USER_ID,
        model=config.SEARCH_MODEL,
    )
    logger.info(f"🚀 Search service ready with tools: {', '.join(config.SEARCH_TOOLS)}")
    return SearchService(aggregator=aggregator, cache=get_search_cache(config))
