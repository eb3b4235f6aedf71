"""Search pipeline: cache, aggregation, profile extraction and summary."""

from models.search import SearchOutcome
from utils.logger import get_logger

from .aggregator import SearchAggregator
from .cache import SearchCache
from .intent import is_person_lookup
from .profile_extractor import ProfileExtractor
from .summary import build_summary

logger = get_logger(__name__)


class SearchService:
    """
    Serves search queries, memoizing complete outcomes per normalized query.

    Upstream failures propagate as SearchError and leave the cache untouched.
    """

    def __init__(
        self,
        aggregator: SearchAggregator,
        cache: SearchCache,
        extractor: ProfileExtractor | None = None,
    ):
        self.aggregator = aggregator
        self.cache = cache
        self.extractor = extractor or ProfileExtractor()

    def search(self, query: str) -> SearchOutcome:
        """
        Answer a query, from cache when a fresh entry exists.

        Args:
            query: Free-text query as typed by the user

        Returns:
            SearchOutcome; a cache hit returns the exact object stored earlier
        """
        cached = self.cache.get(query)
        if cached is not None:
            logger.info(f"✅ Cache hit for query: '{query[:50]}'")
            return cached

        person_lookup = is_person_lookup(query)
        logger.info(
            f"🔎 Searching: {query[:100]}",
            extra={"extra_fields": {"person_lookup": person_lookup}},
        )

        aggregated = self.aggregator.aggregate(query, person_lookup)

        profile = None
        if person_lookup:
            extracted = self.extractor.extract(aggregated.results)
            if not extracted.is_empty():
                profile = extracted

        outcome = SearchOutcome(
            query=query,
            summary=build_summary(query, aggregated.results, profile, person_lookup),
            results=aggregated.results,
            profile=profile,
            debug=aggregated.debug,
        )

        self.cache.set(query, outcome)
        logger.info(
            f"Search complete: {len(outcome.results)} results",
            extra={"extra_fields": {"profile_found": profile is not None}},
        )
        return outcome
