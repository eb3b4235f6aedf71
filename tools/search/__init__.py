"""Person search pipeline for ScoutMail."""

from .cache import SearchCache
from .factory import create_search_service_from_env
from .profile_extractor import ProfileExtractor, ProfileRule
from .service import SearchService

__all__ = [
    "ProfileExtractor",
    "ProfileRule",
    "SearchCache",
    "SearchService",
    "create_search_service_from_env",
]
