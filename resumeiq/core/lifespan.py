from contextlib import asynccontextmanager
import logging

from resumeiq.core.config import settings, validate_settings
from resumeiq.core.container import build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    services = getattr(app.state, "services", None)
    owns_services = services is None
    if owns_services:
        validate_settings(settings)
        services = build_services(settings)
        app.state.services = services
        logger.info(
            "startup_config_validated ai_provider=%s quota_scope=%s",
            settings.ai_provider,
            settings.quota_scope,
        )

    services.database.connection()
    yield

    if owns_services:
        await services.assessor.aclose()
        services.database.close()
