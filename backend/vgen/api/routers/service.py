# vgen/api/routers/service.py
"""
Local service finder. Public and demo-only: every result is generated.
"""
import datetime as dt
from typing import Literal, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from vgen.api.deps import handle_failures
from vgen.services import local_services

router = APIRouter(prefix="/service", tags=["service"])

SEARCH_NOTE = "Demo results - in production, these would be real service providers"
FEATURED_NOTE = (
    "These are demo featured services. In production, featured services would be "
    "curated based on ratings and partnerships."
)
DETAIL_NOTE = (
    "This is demo service data. In production, this would be real service provider "
    "information from verified databases."
)
NEARBY_NOTE = "Demo location-based search. In production, this would use real mapping and business data APIs."


class SearchIn(BaseModel):
    location: str = Field(min_length=3)
    category: Optional[str] = None
    subcategory: Optional[str] = None
    radius: int = Field(default=10, ge=1, le=50)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    priceRange: Optional[Literal["$", "$$", "$$$", "$$$$"]] = None


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


@router.get("/categories")
async def categories():
    items = local_services.CATEGORIES
    return {"success": True, "data": {"categories": items, "total": len(items), "note": local_services.DEMO_NOTE}}


@router.post("/search")
async def search(body: SearchIn):
    """
    Search demo providers around a location.

    Returns:
        dict: searchQuery, results (3 providers), totalResults, searchRadius,
            centerLocation, searchTime, note
    """
    with handle_failures("Failed to search services. Please try again."):
        found = local_services.search_services(
            body.location, body.category, body.subcategory, body.radius, body.rating, body.priceRange
        )
        return {
            "success": True,
            "message": "Local services search completed",
            "data": {
                "searchQuery": body.model_dump(),
                "results": found["services"],
                "totalResults": len(found["services"]),
                "searchRadius": body.radius,
                "centerLocation": found["centerLocation"],
                "searchTime": _now(),
                "note": SEARCH_NOTE,
            },
        }


@router.get("/featured")
async def featured():
    items = local_services.FEATURED
    return {
        "success": True,
        "data": {"services": items, "total": len(items), "featured": True, "note": FEATURED_NOTE},
    }


@router.get("/nearby/{lat}/{lng}")
async def nearby(
    lat: float,
    lng: float,
    radius: int = Query(5, ge=1, le=50),
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
):
    with handle_failures("Failed to search nearby services. Please try again."):
        services = local_services.nearby_services(lat, lng, radius, category, limit)
        return {
            "success": True,
            "message": "Nearby services found",
            "data": {
                "center": {"latitude": lat, "longitude": lng},
                "radius": radius,
                "services": services,
                "totalResults": len(services),
                "searchTime": _now(),
                "note": NEARBY_NOTE,
            },
        }


@router.get("/{service_id}")
async def detail(service_id: str):
    return {"success": True, "data": {"service": local_services.service_detail(service_id), "note": DETAIL_NOTE}}
