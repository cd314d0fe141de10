import html
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from placefinder.core.errors import ConfigurationError
from placefinder.core.logger import logs
from placefinder.models.search_model import LatLng
from placefinder.services.Link_service import LinkBuilder

MAP_PAGE = """<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Map</title>
    <style>html,body{{height:100%}} body{{margin:0}} .wrap{{height:100vh;display:flex}} iframe{{flex:1;border:0}}</style>
  </head>
  <body>
    <div class="wrap">
      <iframe src="{src}" allowfullscreen loading="lazy" referrerpolicy="origin"></iframe>
    </div>
  </body>
</html>"""

router = APIRouter()

def get_link_builder(request: Request) -> LinkBuilder:
    return request.app.state.link_builder

@router.get("/map", response_class=HTMLResponse)
async def map_page(
    place_id: str = "",
    origin_lat: Optional[float] = None,
    origin_lng: Optional[float] = None,
    links: LinkBuilder = Depends(get_link_builder)
):
    """Full-viewport embed for one place, or directions to it when origin coordinates are given."""
    if not links.browser_key:
        logs.log(logging.WARNING, "Map page requested but GOOGLE_MAPS_BROWSER_KEY is not configured")
        raise ConfigurationError("Google Maps browser key not configured")
    if not place_id:
        return PlainTextResponse("Missing place_id", status_code=400)

    if origin_lat is not None and origin_lng is not None:
        src = links.directions_embed_url(LatLng(lat=origin_lat, lng=origin_lng), place_id)
    else:
        src = links.place_embed_url(place_id)

    return HTMLResponse(MAP_PAGE.format(src=html.escape(src, quote=True)))
