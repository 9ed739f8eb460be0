"""wellpath API - walking routes and nearby nature spots.

API Endpoints:
- GET /health - Health check
- POST /api/v1/route - Route through ordered waypoints
- POST /api/v1/places/nearby - Nature spots around a point
- POST /api/v1/places/rank - Rank caller-supplied places by distance
- POST /api/v1/distance - Great-circle distance between two points
- POST /api/v1/polyline/decode - Decode an encoded polyline
- GET /api/v1/format - Display text for a distance and/or duration
"""

from fastapi import FastAPI

from wellpath.api.routes import router
from wellpath.config import Settings, get_settings
from wellpath.logging_config import setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="wellpath", version="0.1.0")
    app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()
