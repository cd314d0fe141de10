from urllib.parse import quote

from placefinder.models.search_model import LatLng

EMBED_BASE_URL = "https://www.google.com/maps/embed/v1"
SEARCH_BASE_URL = "https://www.google.com/maps/search/?api=1"


def _enc(value) -> str:
    return quote(str(value), safe="")


def _origin(origin: LatLng) -> str:
    return f"{origin.lat},{origin.lng}"


class LinkBuilder:
    """
    Builds Google Maps embed and deep-link URLs.
    Only the browser-restricted key ever ends up in these URLs.
    """

    def __init__(self, browser_key: str):
        self.browser_key = browser_key

    def place_embed_url(self, place_id: str) -> str:
        return f"{EMBED_BASE_URL}/place?key={_enc(self.browser_key)}&q=place_id:{_enc(place_id)}"

    def directions_embed_url(self, origin: LatLng, destination_place_id: str) -> str:
        return (
            f"{EMBED_BASE_URL}/directions?key={_enc(self.browser_key)}"
            f"&origin={_enc(_origin(origin))}&destination=place_id:{_enc(destination_place_id)}"
        )

    def maps_link(self, place_id: str, name: str) -> str:
        return f"{SEARCH_BASE_URL}&query={_enc(name)}&query_place_id={_enc(place_id)}"

    # --- Free-text variants, used when no place id is available ---

    def fallback_maps_link(self, query: str) -> str:
        return f"{SEARCH_BASE_URL}&query={_enc(query)}"

    def fallback_embed_url(self, query: str) -> str:
        return f"{EMBED_BASE_URL}/search?key={_enc(self.browser_key)}&q={_enc(query)}"

    def fallback_directions_embed_url(self, origin: LatLng, query: str) -> str:
        return (
            f"{EMBED_BASE_URL}/directions?key={_enc(self.browser_key)}"
            f"&origin={_enc(_origin(origin))}&destination={_enc(query)}"
        )
