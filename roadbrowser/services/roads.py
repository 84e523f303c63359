# roadbrowser/services/roads.py
"""
Resolución de la lista de carreteras y del detalle de una carretera.

Flujo del detalle:
  1) loading
  2) consultas (a) atributos y (b) nombres de extremos, concurrentes (join)
  3) parseo de ambas; cualquier falla aborta sin commit
  4) extracción: coordenadas por prioridad, longitud, carriles, nombres, URI de ruta
  5) descarga de la geometría (después del par, depende de la URI)
  6) commit atómico + nuevo centro del mapa
  7) fin de loading (siempre)
"""

import asyncio
import logging
from typing import Any, Dict, FrozenSet, List, Optional

import httpx

from roadbrowser.config import SPARQL_ENDPOINT
from roadbrowser.services import bindings, queries
from roadbrowser.services.errors import MissingBindingError, ParseError, RoadBrowserError
from roadbrowser.services.models import GeoPoint, NamedLocation, RoadDetail
from roadbrowser.services.results import Binding, ResultSet, parse_results
from roadbrowser.services.sparql import fetch_geometry, run_query
from roadbrowser.services.state import ResolutionController

log = logging.getLogger("roadbrowser.roads")


def _parse_logged(texts: List[str]) -> List[ResultSet]:
    try:
        return [parse_results(text) for text in texts]
    except ParseError:
        log.error("Unparseable query response(s): %s", texts)
        raise


def _point(row: Binding, loc: str) -> GeoPoint:
    return GeoPoint(
        lat=bindings.to_number(bindings.scalar([row], f"{loc}_lat")),
        lng=bindings.to_number(bindings.scalar([row], f"{loc}_lng")),
    )


def rank_attributes(attributes: ResultSet) -> List[Binding]:
    """
    Filas utilizables de la consulta (a), la de mayor prioridad primero.
    Sin filas utilizables no hay coordenadas: MissingBindingError.
    """
    ranked = bindings.rank_rows(
        attributes.rows, queries.COORDINATE_VARS, queries.PRIORITY_VARS
    )
    if not ranked:
        first = attributes.rows[0] if attributes.rows else {}
        missing = [v for v in queries.COORDINATE_VARS if v not in first]
        raise MissingBindingError((missing or list(queries.COORDINATE_VARS))[0])
    return ranked


def extract_road_detail(
    road_name: str,
    ranked: List[Binding],
    names: ResultSet,
    route_geometry: Optional[Dict[str, Any]] = None,
) -> RoadDetail:
    """
    Arma el RoadDetail a partir de las dos consultas primarias.
    Coordenadas y longitud salen solo de la primera fila del ranking;
    carriles y nombres se juntan de todas las filas.
    """
    top = ranked[0]

    start = NamedLocation(
        coordinate=_point(top, "start"),
        display_names=bindings.collect(names.rows, "start_name"),
    )
    end = NamedLocation(
        coordinate=_point(top, "end"),
        display_names=bindings.collect(names.rows, "end_name"),
    )

    return RoadDetail(
        name=road_name,
        length_km=bindings.to_number(bindings.scalar(ranked, "length")),
        lane_counts=bindings.collect(ranked, "lanes_count", bindings.to_number),
        start=start,
        end=end,
        route_geometry=route_geometry or {},
    )


async def fetch_road_names(
    client: httpx.AsyncClient, endpoint: str = SPARQL_ENDPOINT
) -> FrozenSet[str]:
    text = await run_query(client, endpoint, queries.build_road_list_query())
    (result,) = _parse_logged([text])
    return bindings.collect(result.rows, "roadLabel")


async def fetch_road_detail(
    client: httpx.AsyncClient, road_name: str, endpoint: str = SPARQL_ENDPOINT
) -> RoadDetail:
    """
    Resuelve el detalle completo sin tocar el estado.
    Lanza TransportError, ParseError o MissingBindingError.
    """
    texts = list(
        await asyncio.gather(
            run_query(client, endpoint, queries.build_road_attributes_query(road_name)),
            run_query(client, endpoint, queries.build_endpoint_names_query(road_name)),
        )
    )
    attributes, names = _parse_logged(texts)

    try:
        ranked = rank_attributes(attributes)
        route_uri = bindings.scalar(ranked, "route")
        detail = extract_road_detail(road_name, ranked, names)
    except MissingBindingError:
        log.error("Unusable query results for %r: %s", road_name, texts)
        raise

    # La geometría depende de la URI extraída: va estrictamente después
    geometry = await fetch_geometry(client, route_uri)
    return detail.model_copy(update={"route_geometry": geometry})


class RoadResolver:
    """
    Une las resoluciones con el ResolutionController: maneja loading,
    atrapa los errores en el borde y hace commit solo con datos completos.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        controller: ResolutionController,
        endpoint: str = SPARQL_ENDPOINT,
    ):
        self._client = client
        self._controller = controller
        self._endpoint = endpoint

    @property
    def controller(self) -> ResolutionController:
        return self._controller

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def update_road_list(self) -> None:
        self._controller.begin_loading()
        try:
            names = await fetch_road_names(self._client, self._endpoint)
            self._controller.commit_road_list(names)
            log.info("Loaded %d road names", len(names))
        except RoadBrowserError as e:
            log.error("Road list resolution failed: %s", e)
        finally:
            self._controller.end_loading()

    async def get_road_details(self, road_name: str) -> None:
        token = self._controller.issue_token()
        self._controller.begin_loading()
        try:
            detail = await fetch_road_detail(self._client, road_name, self._endpoint)
            center = detail.start.coordinate.midpoint(detail.end.coordinate)
            if self._controller.commit_road_detail(detail, center, token=token):
                log.info("Resolved road %r", road_name)
        except RoadBrowserError as e:
            log.error("Road detail resolution for %r failed: %s", road_name, e)
        finally:
            self._controller.end_loading()
