"""
Campaign CRM Backend - FastAPI Application
Main entry point with all routes configured.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from crm_backend.config import settings
from crm_backend.database import init_db
from crm_backend.core.exceptions import CRMException, UnauthorizedError, ValidationError
from crm_backend.core.logging import setup_logging
from crm_backend.core.validation import format_errors
from crm_backend.schemas.common import ErrorResponse, HealthResponse

# Import all API routers
from crm_backend.api import auth, profile, customer_lists, customers, campaigns, dashboard

# Import models to ensure they are registered with SQLModel
from crm_backend.models import (
    User, CustomerList, Customer,
    Campaign, CampaignCustomerList, CampaignCustomer,
    Activity
)

VERSION = "1.0.0"

# Error bodies documented on every API route
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    setup_logging()
    await init_db()
    logger.info("Campaign CRM API started")
    yield
    # Shutdown


app = FastAPI(
    title="Campaign CRM API",
    description="Customer lists, customers and campaigns with derived campaign membership",
    version=VERSION,
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CRMException)
async def crm_exception_handler(request: Request, exc: CRMException):
    """Map each domain error category to its status code and JSON body."""
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body/path validation failures share the ValidationError shape."""
    err = ValidationError("Validation error", errors=format_errors(exc.errors()))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


# Include all routers
app.include_router(auth.router, responses=ERROR_RESPONSES)
app.include_router(profile.router, responses=ERROR_RESPONSES)
app.include_router(customer_lists.router, responses=ERROR_RESPONSES)
app.include_router(customers.router, responses=ERROR_RESPONSES)
app.include_router(campaigns.router, responses=ERROR_RESPONSES)
app.include_router(dashboard.router, responses=ERROR_RESPONSES)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "Campaign CRM API is running",
        "version": VERSION,
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Detailed health check."""
    return HealthResponse(status="healthy", version=VERSION)
