"""
Questify API

Run:
    uvicorn questify.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from questify import __version__
from questify.config import CORS_ORIGINS
from questify.database import models  # noqa: F401  (registers tables on Base)
from questify.database.database import Base, engine
from questify.generation.errors import GenerationError
from questify.routers import auth, generation, papers

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(name)s  %(message)s")
log = logging.getLogger("questify")


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: datetime


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the database tables on startup
    Base.metadata.create_all(bind=engine)
    log.info("Questify API %s ready", __version__)
    yield


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": exc.message})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Questify API",
        description="AI-generated practice question papers",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GenerationError, generation_error_handler)

    app.include_router(auth.router)
    app.include_router(generation.router)
    app.include_router(papers.router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return HealthResponse(
            status="healthy",
            service="questify-api",
            timestamp=datetime.now(timezone.utc),
        )

    return app


app = create_app()
