# roadbrowser/services/queries.py
"""
Texto de las consultas SPARQL contra el dataset de carreteras.
"""

from roadbrowser.services.bindings import COORDINATE_BRANCHES, union_of

PREFIXES = """prefix bp: <http://www.coins.tsukuba.ac.jp/~s1711402/lod/mylod/property/>
prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#>
prefix ic: <http://imi.go.jp/ns/core/rdf#>
"""

# Variables que deben venir no vacías en la fila que usamos
COORDINATE_VARS = ("start_lat", "start_lng", "end_lat", "end_lng")
PRIORITY_VARS = ("start_priority", "end_priority")


def escape_literal(value: str) -> str:
    """Escapa un string para meterlo entre comillas dobles en SPARQL."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def build_road_list_query() -> str:
    return PREFIXES + """
select distinct * where {
  ?road bp:category "road" ;
    rdfs:label ?roadLabel .
}"""


def build_road_attributes_query(road_name: str) -> str:
    """
    Consulta (a): coordenadas de inicio/fin, longitud, número de carriles y
    la referencia (URI) a la geometría de la ruta.
    """
    name = escape_literal(road_name)
    return PREFIXES + f"""
select distinct ?start_lng ?start_lat ?end_lng ?end_lat ?start_priority ?end_priority ?length ?lanes_count ?route where {{
  ?road bp:category "road" ;
    rdfs:label "{name}"@ja ;
    bp:起点 ?start ;
    bp:終点 ?end ;
    bp:length ?length ;
    bp:車線数 ?lanes_count ;
    bp:route ?route .
  {union_of(COORDINATE_BRANCHES, "start")}

  {union_of(COORDINATE_BRANCHES, "end")}

  filter(str(?end_lng) != "") .
  filter(str(?end_lat) != "") .
  filter(str(?start_lng) != "") .
  filter(str(?start_lat) != "") .
}} order by desc(?start_priority) desc(?end_priority)"""


def build_endpoint_names_query(road_name: str) -> str:
    """
    Consulta (b): nombres de los extremos. El nombre puede ser un literal
    directo o la etiqueta de un recurso referenciado (union sin prioridad).
    """
    name = escape_literal(road_name)
    return PREFIXES + f"""
select distinct ?start_name ?end_name where {{
  ?road bp:category "road" ;
    rdfs:label "{name}"@ja .
  {{
    ?road bp:起点 ?start_name .
    filter(isliteral(?start_name)) .
  }} union {{
    ?road bp:起点 ?start .
    ?start rdfs:label ?start_name .
  }}

  {{
    ?road bp:終点 ?end_name .
    filter(isliteral(?end_name)) .
  }} union {{
    ?road bp:終点 ?end .
    ?end rdfs:label ?end_name .
  }}
}}"""
