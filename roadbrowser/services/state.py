# roadbrowser/services/state.py

import logging
from typing import Iterable, Optional

from roadbrowser.services.models import GeoPoint, MapView, ResolutionState, RoadDetail

log = logging.getLogger("roadbrowser.state")


class ResolutionController:
    """
    Dueño único del ResolutionState.

    Toda mutación pasa por estos métodos y reemplaza el snapshot completo
    (model_copy), así que quien lea `state` nunca ve un RoadDetail a medias.
    Todo corre en el mismo event loop, no hacen falta locks.
    """

    def __init__(self, discard_superseded: bool = False):
        self._state = ResolutionState()
        self._in_flight = 0
        self._latest_token = 0
        self._discard_superseded = discard_superseded

    @property
    def state(self) -> ResolutionState:
        return self._state

    # --------- LOADING ---------

    def begin_loading(self) -> None:
        self._in_flight += 1
        self._replace(is_loading=True)

    def end_loading(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)
        self._replace(is_loading=self._in_flight > 0)

    # --------- COMMITS ---------

    def issue_token(self) -> int:
        """Token creciente por cada resolución de detalle."""
        self._latest_token += 1
        return self._latest_token

    def commit_road_list(self, names: Iterable[str]) -> None:
        self._replace(road_names=frozenset(names))

    def commit_road_detail(
        self,
        detail: RoadDetail,
        new_center: GeoPoint,
        token: Optional[int] = None,
    ) -> bool:
        """
        Reemplaza el detalle actual y recentra el mapa (el zoom no se toca).
        Con discard_superseded, un token viejo se descarta y regresa False.
        """
        if (
            self._discard_superseded
            and token is not None
            and token != self._latest_token
        ):
            log.warning(
                "Discarding superseded result for %r (token %d, latest %d)",
                detail.name, token, self._latest_token,
            )
            return False

        map_view = self._state.map_view.model_copy(update={"center": new_center})
        self._replace(current_detail=detail, map_view=map_view)
        return True

    def update_map_view(
        self, zoom: Optional[int] = None, center: Optional[GeoPoint] = None
    ) -> MapView:
        """Pan/zoom del usuario sobre el mapa."""
        update = {}
        if zoom is not None:
            update["zoom"] = zoom
        if center is not None:
            update["center"] = center
        map_view = self._state.map_view.model_copy(update=update)
        self._replace(map_view=map_view)
        return map_view

    def _replace(self, **fields) -> None:
        self._state = self._state.model_copy(update=fields)
