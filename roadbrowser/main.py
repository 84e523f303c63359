# roadbrowser/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roadbrowser.api.routes_basic import router as basic_router
from roadbrowser.api.routes_roads import router as roads_router
from roadbrowser.config import (
    DISCARD_SUPERSEDED_RESULTS,
    HTTP_TIMEOUT_SECONDS,
    LOG_LEVEL,
    SPARQL_ENDPOINT,
)
from roadbrowser.services.roads import RoadResolver
from roadbrowser.services.state import ResolutionController

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


def create_app(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    endpoint: str = SPARQL_ENDPOINT,
    discard_superseded: bool = DISCARD_SUPERSEDED_RESULTS,
) -> FastAPI:
    """
    `transport` permite inyectar un httpx.MockTransport en las pruebas.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(
            transport=transport, timeout=HTTP_TIMEOUT_SECONDS
        ) as client:
            controller = ResolutionController(discard_superseded=discard_superseded)
            app.state.resolver = RoadResolver(client, controller, endpoint=endpoint)
            # Carga inicial de la lista de carreteras
            await app.state.resolver.update_road_list()
            yield

    app = FastAPI(
        title="Road Browser Backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS totalmente abierto
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(basic_router)
    app.include_router(roads_router, prefix="/api")
    return app


app = create_app()
