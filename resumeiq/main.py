import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from resumeiq.api.v1.health import router as health_router
from resumeiq.api.v1.report import router as report_router
from resumeiq.api.v1.resume import router as resume_router
from resumeiq.core.config import settings
from resumeiq.core.container import Services
from resumeiq.core.cors import cors_allow_origin_regex, cors_allowed_origins
from resumeiq.core.errors import install_error_handlers
from resumeiq.core.lifespan import lifespan
from resumeiq.core.rate_limit import limiter

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)


def create_app(services: Services | None = None) -> FastAPI:
    app = FastAPI(title="ResumeIQ API", version="0.1.0", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    origins = cors_allowed_origins(settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if "*" in origins else origins,
        allow_origin_regex=cors_allow_origin_regex(settings),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    install_error_handlers(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(resume_router, prefix="/v1", tags=["Resume"])
    app.include_router(report_router, prefix="/v1", tags=["Report"])
    return app


app = create_app()
