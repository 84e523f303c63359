# roadbrowser/services/results.py

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from roadbrowser.services.errors import ParseError


TermType = Literal["uri", "literal", "bnode"]


class Term(BaseModel):
    """
    Un término RDF tal como viene en application/sparql-results+json:
      - {"type": "uri", "value": ...}
      - {"type": "literal", "value": ..., ["xml:lang" | "datatype"]}
      - {"type": "bnode", "value": ...}
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: TermType
    value: str
    lang: Optional[str] = Field(default=None, alias="xml:lang")
    datatype: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _legacy_typed_literal(cls, v):
        # Formato SPARQL 1.0: algunos endpoints todavía mandan "typed-literal"
        if v == "typed-literal":
            return "literal"
        return v


Binding = Dict[str, Term]


class _Head(BaseModel):
    vars: List[str] = Field(default_factory=list)


class _Results(BaseModel):
    bindings: List[Binding]


class _Document(BaseModel):
    head: _Head
    results: _Results


class ResultSet(BaseModel):
    """Variables declaradas + filas (bindings) en el orden del endpoint."""
    model_config = ConfigDict(frozen=True)

    vars: List[str]
    rows: List[Binding]

    def __len__(self) -> int:
        return len(self.rows)


def parse_results(text: str) -> ResultSet:
    """
    Parsea el texto crudo de una respuesta SPARQL JSON.
    Si no es JSON válido o no tiene la forma {head, results.bindings},
    lanza ParseError conservando el texto original.
    """
    try:
        doc = _Document.model_validate_json(text)
    except ValidationError as e:
        raise ParseError(text, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e

    return ResultSet(vars=doc.head.vars, rows=doc.results.bindings)
