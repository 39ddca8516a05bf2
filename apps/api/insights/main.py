import logging
from typing import Optional

from fastapi import FastAPI

from insights.core.config import AnalyticsConfig, config_from_env, getenv_default, load_env
from insights.routes.checkins import router as checkins_router
from insights.routes.health import router as health_router
from insights.routes.voice_stability import router as voice_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AnalyticsConfig] = None) -> FastAPI:
    env_path = load_env()
    if config is None:
        config = config_from_env()

    logging.basicConfig(level=getenv_default("LOG_LEVEL", "INFO").upper())
    logger.info("ENV FILE: %s", env_path)
    logger.info(
        "analytics config: floor=%s headroom=%s streak_requires_today=%s",
        config.expressive_floor,
        config.axis_headroom,
        config.streak_requires_today,
    )

    app = FastAPI(title="Insights API", version="0.1.0")

    app.state.analytics_config = config

    app.include_router(health_router)
    app.include_router(voice_router)
    app.include_router(checkins_router)

    return app

app = create_app()
