import logging
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from dashboard_api.core.config import config
from dashboard_api.core.db import models  # noqa: F401  registers every table
from dashboard_api.core.db.engine import create_all_tables
from dashboard_api.core.error_handler import (
    global_exception_handler,
    request_validation_handler,
)
from dashboard_api.core.response_interceptor import (
    SuccessResponseInterceptor,
    CustomAPIRoute,
)
from dashboard_api.modules.health import router as health_router
from dashboard_api.modules.projects import router as projects_router
from dashboard_api.modules.deployments import router as deployments_router
from dashboard_api.modules.users import router as users_router
from dashboard_api.modules.invitations import router as invitations_router
from dashboard_api.modules.analytics import router as analytics_router

# Configure logging to output to console
logging.basicConfig(
    level=config.log_level.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.db_auto_create:
        await create_all_tables()
    logger.info("Dashboard API ready")
    yield
    logger.info("Dashboard API shutting down")


app = FastAPI(
    title="Dashboard API",
    description="Console backend for projects, deployments and their users",
    version="1.0.0",
    lifespan=lifespan,
)

# Override the default route class to support skip_interceptor decorator
app.router.route_class = CustomAPIRoute

app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials="*" not in config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add Success Response Interceptor (must be added after CORS)
app.add_middleware(SuccessResponseInterceptor)

app.include_router(health_router)
app.include_router(projects_router)
app.include_router(deployments_router)
app.include_router(users_router)
app.include_router(invitations_router)
app.include_router(analytics_router)
