import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assetsiq.core.settings import Settings
from assetsiq.infrastructure import GeminiExtractionClient, configure_extraction_client
from assetsiq.routes import assets, batches


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    gemini_client: GeminiExtractionClient | None = None
    if settings.gemini_api_key:
        gemini_client = GeminiExtractionClient.from_settings(settings)
        configure_extraction_client(gemini_client)
    else:
        logging.getLogger(__name__).warning("GEMINI_API_KEY is not set; extractions will fail until it is configured")

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if gemini_client is not None:
            await gemini_client.aclose()

    app = FastAPI(title="AssetsIQ API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.include_router(batches.router, prefix="/api")
    app.include_router(assets.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "AssetsIQ API",
                "docs": "/docs",
                "health": "/api/batches/current",
            }
        )

    return app


app = create_app()
