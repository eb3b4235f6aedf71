"""Search endpoint: web research with optional person profile."""

import asyncio

from fastapi import APIRouter, Depends, Request

from models.errors import SearchError
from server.dependencies import get_api_key, get_search_service
from server.schemas.requests import SearchRequest
from server.schemas.responses import SearchResponseDTO
from server.utils import error_response
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Search"], dependencies=[Depends(get_api_key)])


@router.post("/search", response_model=SearchResponseDTO, response_model_exclude_none=True)
async def search(
    request: Request,
    body: SearchRequest,
    service=Depends(get_search_service),
):
    """Run a search through the toolkit's engines, answering repeats from the cache."""
    request_id = getattr(request.state, "request_id", "unknown")
    try:
        outcome = await asyncio.to_thread(service.search, body.query)
    except SearchError as e:
        logger.error(
            "Search failed",
            extra={"extra_fields": {"request_id": request_id, "error": str(e)}},
        )
        return error_response("Internal server error", str(e))

    return SearchResponseDTO.model_validate(outcome.to_dict())
