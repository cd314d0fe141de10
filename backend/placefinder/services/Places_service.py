import httpx
import logging
from placefinder.core.errors import UpstreamError
from placefinder.core.logger import logs
from placefinder.models.search_model import LatLng
from placefinder.repos.cache_repo import TTLCache

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
ACCEPTED_STATUSES = ("OK", "ZERO_RESULTS")


def _format_radius(radius_meters: float) -> str:
    radius = float(radius_meters)
    return str(int(radius)) if radius.is_integer() else str(radius)

class PlacesService:
    def __init__(self, client: httpx.AsyncClient, cache: TTLCache, api_key: str, timeout: float = 10.0):
        self.client = client
        self.cache = cache
        self.api_key = api_key
        self.timeout = timeout
        self.text_search_url = TEXT_SEARCH_URL

    @staticmethod
    def cache_key(query: str, location: LatLng | None, radius_meters: float | None) -> str:
        lat = location.lat if location else None
        lng = location.lng if location else None
        return f"textsearch:{query}:{lat}:{lng}:{radius_meters}"

    async def text_search(self, query: str, location: LatLng | None = None, radius_meters: float | None = None) -> dict:
        """
        Google Places Text Search, memoized on the exact (query, location, radius).
        Raises UpstreamError on transport failures and on any status other than OK / ZERO_RESULTS.
        """
        # 1. Check Cache
        key = self.cache_key(query, location, radius_meters)
        cached = self.cache.get(key)
        if cached is not None:
            logs.log(logging.INFO, f"✓ Places cache HIT for '{query}'")
            return cached

        # 2. Call External API
        logs.log(logging.INFO, f"✗ Places cache MISS for '{query}'. Calling Places Text Search...")
        params = {"query": query, "key": self.api_key}
        if location and radius_meters:
            params["location"] = f"{location.lat},{location.lng}"
            params["radius"] = _format_radius(radius_meters)

        try:
            response = await self.client.get(self.text_search_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logs.log(logging.ERROR, f"Places API request failed: {type(e).__name__}")
            raise UpstreamError("Google Places request failed") from e

        status = data.get("status") if isinstance(data, dict) else None
        if status not in ACCEPTED_STATUSES:
            logs.log(logging.ERROR, f"Google Places error: {status}", extra={"error_message": data.get("error_message") if isinstance(data, dict) else None})
            raise UpstreamError(f"Google Places error: {status}", status=status)

        # 3. Cache raw payload
        self.cache.set(key, data)
        logs.log(logging.INFO, f"Places returned {len(data.get('results') or [])} results ({status})")
        return data
