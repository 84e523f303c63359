# roadbrowser/services/models.py

from typing import Any, Dict, FrozenSet, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from roadbrowser.config import DEFAULT_CENTER, DEFAULT_ZOOM


class _Frozen(BaseModel):
    # Los registros se reemplazan completos, nunca se mutan campo por campo
    model_config = ConfigDict(frozen=True)


class RoadSummary(_Frozen):
    name: str


class GeoPoint(_Frozen):
    lat: float
    lng: float

    def midpoint(self, other: "GeoPoint") -> "GeoPoint":
        return GeoPoint(
            lat=(self.lat + other.lat) / 2,
            lng=(self.lng + other.lng) / 2,
        )


class NamedLocation(_Frozen):
    """
    Un extremo (inicio o fin) de una carretera.
    Puede conocerse por varios nombres, por eso es un conjunto.
    """
    coordinate: GeoPoint
    display_names: FrozenSet[str] = frozenset()


class RoadDetail(_Frozen):
    """
    Registro completo de la carretera seleccionada.
    Solo lo crea una resolución exitosa; lo posee el ResolutionController.
    """
    name: str
    length_km: float
    # Distintos tramos de la misma carretera pueden reportar distintos carriles
    lane_counts: FrozenSet[Union[int, float]]
    start: NamedLocation
    end: NamedLocation
    route_geometry: Dict[str, Any]


class MapView(_Frozen):
    zoom: int = DEFAULT_ZOOM
    center: GeoPoint = Field(
        default_factory=lambda: GeoPoint(lat=DEFAULT_CENTER[0], lng=DEFAULT_CENTER[1])
    )


class ResolutionState(_Frozen):
    is_loading: bool = False
    road_names: Optional[FrozenSet[str]] = None
    current_detail: Optional[RoadDetail] = None
    map_view: MapView = Field(default_factory=MapView)
