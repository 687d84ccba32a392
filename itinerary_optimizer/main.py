import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from itinerary_optimizer import __version__
from itinerary_optimizer.api import router as optimization_router
from itinerary_optimizer.config import OptimizerSettings, config
from itinerary_optimizer.services import ItineraryOptimizer, create_provider

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    optimizer = ItineraryOptimizer(
        provider=create_provider(),
        settings=OptimizerSettings.from_env(),
    )
    app.state.optimizer = optimizer
    logger.info(f"[App] Optimizer ready (provider={optimizer.provider.name})")
    try:
        yield
    finally:
        await optimizer.aclose()
        app.state.optimizer = None


def create_app() -> FastAPI:
    app = FastAPI(
        title="Itinerary Route Optimizer",
        description="Per-day activity ordering and scheduling for travel itineraries",
        version=__version__,
        lifespan=lifespan,
    )

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(optimization_router)

    @app.get("/")
    def read_root():
        return {"status": "ok", "message": "Itinerary optimizer is running", "env": config.APP_ENV}

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    uvicorn.run("itinerary_optimizer.main:app", host="0.0.0.0", port=8000)
