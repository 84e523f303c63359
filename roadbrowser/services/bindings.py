# roadbrowser/services/bindings.py
"""
Proyección de filas SPARQL a valores primitivos del modelo de dominio.

Reglas:
  - scalar:   valor de una variable en la primera fila (MissingBindingError si no está).
  - to_number: coerción numérica; texto no numérico -> NaN, sin validar.
  - collect:  una variable sobre TODAS las filas, como conjunto.
  - rank_rows: prioridad/fallback de coordenadas (ver CoordinateBranch).
"""

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Set, TypeVar, Union

from roadbrowser.services.errors import MissingBindingError
from roadbrowser.services.results import Binding

T = TypeVar("T")

Number = Union[int, float]


def scalar(rows: Sequence[Binding], var: str) -> str:
    if not rows or var not in rows[0]:
        raise MissingBindingError(var)
    return rows[0][var].value


def to_number(text: str) -> Number:
    """
    Convierte a número. Los enteros quedan como int (p. ej. carriles "4" -> 4).
    Texto no numérico regresa math.nan en silencio: el endpoint garantiza que
    las variables numéricas vienen bien formadas.
    """
    try:
        value = float(text)
    except (TypeError, ValueError):
        return math.nan
    if math.isfinite(value) and value.is_integer() and "." not in text and "e" not in text.lower():
        return int(value)
    return value


def collect(
    rows: Iterable[Binding], var: str, convert: Callable[[str], T] = str
) -> frozenset:
    """Valores de `var` en todas las filas (las que no la traen se ignoran)."""
    values: Set[T] = set()
    for row in rows:
        term = row.get(var)
        if term is None:
            continue
        values.add(convert(term.value))
    return frozenset(values)


# --------- PRIORIDAD / FALLBACK DE COORDENADAS ---------

@dataclass(frozen=True)
class CoordinateBranch:
    """
    Una forma alternativa de obtener la coordenada de una ubicación.

    `pattern` es el patrón de grafo con los placeholders {loc}, {lng}, {lat};
    `priority` es mayor para la fuente preferida. Cada rama se inyecta en la
    consulta como un bloque de UNION que además liga ?{loc}_priority, y
    rank_rows vuelve a aplicar el orden del lado del cliente.
    """
    name: str
    priority: int
    pattern: str

    def render(self, loc: str) -> str:
        body = self.pattern.format(loc=f"?{loc}", lng=f"?{loc}_lng", lat=f"?{loc}_lat")
        return f"{body}\n    bind({self.priority} as ?{loc}_priority) ."


COORDINATE_BRANCHES: List[CoordinateBranch] = [
    # La coordenada viene directo sobre la ubicación
    CoordinateBranch(
        name="direct",
        priority=2,
        pattern="{loc} ic:経度 {lng} .\n    {loc} ic:緯度 {lat} .",
    ),
    # O a través de un recurso intermedio ic:座標
    CoordinateBranch(
        name="via_coordinate",
        priority=1,
        pattern=(
            "{loc} ic:座標 {loc}_coordinate .\n"
            "    {loc}_coordinate ic:経度 {lng} .\n"
            "    {loc}_coordinate ic:緯度 {lat} ."
        ),
    ),
]


def union_of(branches: Sequence[CoordinateBranch], loc: str) -> str:
    """Arma el bloque `{ ... } union { ... }` para la ubicación `loc`."""
    ordered = sorted(branches, key=lambda b: b.priority, reverse=True)
    return " union ".join("{\n    " + b.render(loc) + "\n  }" for b in ordered)


def _is_filled(row: Binding, var: str) -> bool:
    term = row.get(var)
    return term is not None and term.value != ""


def _priority(row: Binding, var: str) -> Number:
    term = row.get(var)
    if term is None:
        return 0
    value = to_number(term.value)
    return 0 if math.isnan(value) else value


def rank_rows(
    rows: Sequence[Binding],
    required: Sequence[str],
    priority_vars: Sequence[str],
) -> List[Binding]:
    """
    Filtra las filas que traen todas las variables `required` no vacías y las
    ordena por prioridad descendente (en el orden de `priority_vars`).
    El sort es estable: los empates conservan el orden del endpoint.
    """
    surviving = [r for r in rows if all(_is_filled(r, v) for v in required)]
    surviving.sort(
        key=lambda r: tuple(_priority(r, v) for v in priority_vars),
        reverse=True,
    )
    return surviving
