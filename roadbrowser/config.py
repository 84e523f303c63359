# roadbrowser/config.py
import os
from typing import Optional


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


# Endpoint SPARQL del dataset de carreteras
SPARQL_ENDPOINT = os.getenv(
    "SPARQL_ENDPOINT", "http://localhost:3030/tsukuba-highway/query"
)

SPARQL_RESULTS_TYPE = "application/sparql-results+json"
GEOMETRY_TYPES = "application/geo+json, application/json"

# None -> sin timeout: una petición colgada deja el indicador de carga activo
HTTP_TIMEOUT_SECONDS = _env_float("HTTP_TIMEOUT_SECONDS")

# Descarta resultados de una selección ya reemplazada por otra más nueva
DISCARD_SUPERSEDED_RESULTS = _env_flag("DISCARD_SUPERSEDED_RESULTS")

# Vista inicial del mapa (centro de Tsukuba)
DEFAULT_ZOOM = int(os.getenv("DEFAULT_ZOOM", "13"))
DEFAULT_CENTER = (36.0824938, 140.0958208)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
