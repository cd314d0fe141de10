import logging
from placefinder.core.errors import UpstreamError
from placefinder.core.llm_connection import QueryExtractor
from placefinder.core.logger import logs
from placefinder.models.search_model import LatLng, PlaceResult, SearchRequest, SearchResponse
from placefinder.services.Link_service import LinkBuilder
from placefinder.services.Places_service import PlacesService

class SearchService:
    def __init__(
        self,
        extractor: QueryExtractor,
        places_service: PlacesService,
        links: LinkBuilder,
        default_radius_meters: float = 5000.0,
    ):
        self.extractor = extractor
        self.places_service = places_service
        self.links = links
        self.default_radius_meters = default_radius_meters

    async def search(self, request: SearchRequest) -> SearchResponse:
        """
        Orchestrates prompt -> query -> places -> links.
        External failures degrade to a single free-text result instead of an error.
        """
        radius_meters = request.radius_meters if request.radius_meters is not None else self.default_radius_meters

        # --- Step A: Query Extraction ---
        query = await self.extractor.extract_query(request.prompt)

        # --- Step B: Places Lookup ---
        try:
            data = await self.places_service.text_search(query, request.location, radius_meters)
        except UpstreamError as e:
            logs.log(logging.WARNING, f"Places lookup failed, using free-text fallback: {str(e)}")
            data = None

        # --- Step C: Shape Results ---
        raw_results = data.get("results") if data else None
        if isinstance(raw_results, list) and raw_results:
            results = [self._to_place_result(r, request.origin) for r in raw_results]
        else:
            results = [self._fallback_result(query, request.origin)]

        return SearchResponse(query=query, results=results)

    def _to_place_result(self, record: dict, origin: LatLng | None) -> PlaceResult:
        place_id = record.get("place_id")
        name = record.get("name") or ""
        if place_id:
            maps_link = self.links.maps_link(place_id, name)
            embed_url = (
                self.links.directions_embed_url(origin, place_id)
                if origin
                else self.links.place_embed_url(place_id)
            )
        else:
            # no stable id, so search by whatever the record calls itself
            label = name or record.get("formatted_address") or ""
            maps_link = self.links.fallback_maps_link(label)
            embed_url = (
                self.links.fallback_directions_embed_url(origin, label)
                if origin
                else self.links.fallback_embed_url(label)
            )
        return PlaceResult(
            name=name,
            address=record.get("formatted_address"),
            location=(record.get("geometry") or {}).get("location"),
            rating=record.get("rating"),
            user_ratings_total=record.get("user_ratings_total"),
            place_id=place_id,
            maps_link=maps_link,
            embed_url=embed_url,
        )

    def _fallback_result(self, query: str, origin: LatLng | None) -> PlaceResult:
        embed_url = (
            self.links.fallback_directions_embed_url(origin, query)
            if origin
            else self.links.fallback_embed_url(query)
        )
        return PlaceResult(
            name=query,
            maps_link=self.links.fallback_maps_link(query),
            embed_url=embed_url,
        )
