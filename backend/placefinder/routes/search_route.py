import logging
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from placefinder.core.logger import logs
from placefinder.core.rate_limiter import SlidingWindowRateLimiter
from placefinder.models.search_model import SearchRequest, SearchResponse
from placefinder.services.Search_service import SearchService

# --- Dependency Injection ---
def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service

def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    return request.app.state.rate_limiter

def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter)
):
    """Counts the request against its client address; RateLimitError becomes a 429."""
    client_key = request.client.host if request.client else "unknown"
    state = limiter.hit(client_key)
    response.headers["RateLimit-Limit"] = str(state.limit)
    response.headers["RateLimit-Remaining"] = str(state.remaining)
    response.headers["RateLimit-Reset"] = str(max(0, int(state.reset_after + 0.999)))

router = APIRouter(prefix="/api", dependencies=[Depends(enforce_rate_limit)])

# --- The Endpoint ---
@router.post(
    "/llm/search",
    response_model=SearchResponse,
    response_model_exclude_none=True
)
async def search_endpoint(
    request: SearchRequest,
    service: SearchService = Depends(get_search_service)
):
    try:
        return await service.search(request)
    except Exception as e:
        logs.log(logging.ERROR, f"Search failed: {type(e).__name__}: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Internal error"})
