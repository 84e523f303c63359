# roadbrowser/api/routes_basic.py
from fastapi import APIRouter, Depends

from roadbrowser.api.routes_roads import get_resolver
from roadbrowser.services.roads import RoadResolver

router = APIRouter()


@router.get("/")
def root():
    return {"message": "Road browser backend is running"}


@router.get("/health")
def health(resolver: RoadResolver = Depends(get_resolver)):
    """
    Liveness + si la lista de carreteras ya se pudo cargar desde el endpoint.
    """
    state = resolver.controller.state
    return {
        "status": "ok",
        "endpoint": resolver.endpoint,
        "roads_loaded": state.road_names is not None,
        "is_loading": state.is_loading,
    }
