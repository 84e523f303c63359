# roadbrowser/api/routes_roads.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from roadbrowser.services.models import (
    GeoPoint,
    MapView,
    ResolutionState,
    RoadDetail,
    RoadSummary,
)
from roadbrowser.services.roads import RoadResolver

router = APIRouter(tags=["roads"])


class RoadListResponse(BaseModel):
    roads: List[RoadSummary]


class MapViewUpdate(BaseModel):
    """Pan/zoom del usuario. Los campos ausentes no se tocan."""
    zoom: Optional[int] = Field(default=None, ge=0, le=22)
    center: Optional[GeoPoint] = None


def get_resolver(request: Request) -> RoadResolver:
    return request.app.state.resolver


@router.get("/state", response_model=ResolutionState)
def get_state(resolver: RoadResolver = Depends(get_resolver)):
    return resolver.controller.state


@router.get("/roads", response_model=RoadListResponse)
def get_roads(resolver: RoadResolver = Depends(get_resolver)):
    """
    Nombres de carreteras seleccionables (ordenados para el front).
    Lista vacía si todavía no se pudieron cargar.
    """
    names = resolver.controller.state.road_names or frozenset()
    return RoadListResponse(roads=[RoadSummary(name=n) for n in sorted(names)])


@router.post("/roads/refresh", response_model=ResolutionState)
async def refresh_roads(resolver: RoadResolver = Depends(get_resolver)):
    await resolver.update_road_list()
    return resolver.controller.state


@router.get("/roads/current", response_model=RoadDetail)
def get_current_road(resolver: RoadResolver = Depends(get_resolver)):
    detail = resolver.controller.state.current_detail
    if detail is None:
        raise HTTPException(
            status_code=404,
            detail="No road has been resolved yet.",
        )
    return detail


@router.post("/roads/{road_name}/select", response_model=ResolutionState)
async def select_road(road_name: str, resolver: RoadResolver = Depends(get_resolver)):
    """
    Resuelve el detalle de `road_name`. Una falla no es un error HTTP:
    el estado simplemente queda como estaba.
    """
    await resolver.get_road_details(road_name)
    return resolver.controller.state


@router.put("/map", response_model=MapView)
def update_map(req: MapViewUpdate, resolver: RoadResolver = Depends(get_resolver)):
    return resolver.controller.update_map_view(zoom=req.zoom, center=req.center)
