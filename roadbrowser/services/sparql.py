# roadbrowser/services/sparql.py

import json
from typing import Any, Dict, Optional

import httpx

from roadbrowser.config import GEOMETRY_TYPES, SPARQL_RESULTS_TYPE
from roadbrowser.services.errors import ParseError, TransportError


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, str]] = None,
    accept: str = SPARQL_RESULTS_TYPE,
) -> str:
    """
    GET a `url` con un header Accept fijo y regresa el cuerpo como texto.
    Cualquier falla de red o status no exitoso se convierte en TransportError.
    No hay reintentos.
    """
    try:
        resp = await client.get(url, params=params, headers={"Accept": accept})
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise TransportError(
            url, e.response.reason_phrase, status_code=e.response.status_code
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        # InvalidURL no hereda de HTTPError (p. ej. URI de ruta con puerto inválido)
        raise TransportError(url, str(e) or type(e).__name__) from e

    return resp.text


async def run_query(client: httpx.AsyncClient, endpoint: str, query: str) -> str:
    """
    Manda una consulta SPARQL al endpoint (parámetro `query`) y regresa el texto crudo.
    """
    return await fetch_text(client, endpoint, params={"query": query})


async def fetch_geometry(client: httpx.AsyncClient, url: str) -> Dict[str, Any]:
    """
    Descarga el documento GeoJSON de la ruta. El contenido se pasa tal cual al
    front; aquí solo verificamos que sea un objeto JSON.
    """
    text = await fetch_text(client, url, accept=GEOMETRY_TYPES)
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ParseError(text, f"geometry is not valid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ParseError(text, "geometry document must be a JSON object")

    return data
