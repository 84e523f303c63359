# roadbrowser/services/errors.py
from typing import Optional


class RoadBrowserError(Exception):
    """
    Base de todos los errores de resolución.
    Se atrapan en el borde del resolver y nunca llegan al front.
    """


class TransportError(RoadBrowserError):
    """La petición HTTP falló (endpoint inalcanzable o status no exitoso)."""

    def __init__(self, url: str, detail: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"HTTP {status_code} from {url}: {detail}")
        else:
            super().__init__(f"Request to {url} failed: {detail}")


class ParseError(RoadBrowserError):
    """El cuerpo de la respuesta no tiene la forma JSON esperada."""

    def __init__(self, raw: str, detail: str):
        # Guardamos el texto original para poder loguearlo
        self.raw = raw
        super().__init__(f"Malformed response: {detail}")


class MissingBindingError(RoadBrowserError):
    """Una variable esperada no viene en la primera fila utilizable."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Variable '{variable}' is not bound in the first usable row")
