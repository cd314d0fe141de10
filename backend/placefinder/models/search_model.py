from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

# --- Domain Models ---
class LatLng(BaseModel):
    lat: float = Field(..., strict=True, allow_inf_nan=False)
    lng: float = Field(..., strict=True, allow_inf_nan=False)

# --- API Request/Response Models ---
class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1, description="Free-text request, e.g. 'best ramen near Shibuya station'")
    location: Optional[LatLng] = Field(None, description="Bias the search around this point")
    origin: Optional[LatLng] = Field(None, description="Start point for directions embeds")
    radius_meters: Optional[float] = Field(None, ge=1, le=50000, strict=True, allow_inf_nan=False, alias="radiusMeters")

class PlaceResult(BaseModel):
    name: str
    address: Optional[str] = None
    location: Optional[Dict[str, float]] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    place_id: Optional[str] = None
    maps_link: str
    embed_url: str

class SearchResponse(BaseModel):
    query: str
    results: List[PlaceResult]
