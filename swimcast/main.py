"""Swimcast HTTP application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from swimcast.config import settings
from swimcast.api.routes import swimming
from swimcast.api.dependencies import get_swimming_service

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the provider HTTP sessions when the server stops."""
    yield
    await get_swimming_service().aclose()

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Sea swimming scores and forecast windows",
    redirect_slashes=False,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)

# Browser frontends call the score endpoint directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(swimming.router)


@app.get("/")
async def root():
    """Service description and entry points."""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "endpoints": ["/swimming-score", "/swimming-levels"],
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
