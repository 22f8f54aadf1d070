# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Rental Platform API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ErrorKind,
    RentalPlatformException,
    error_envelope,
    rental_platform_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    analysis,
    businesses,
    customers,
    equipment,
    health,
    notifications,
    payments,
    rentals,
    tasks,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs configuration on startup so missing vendor credentials show up
    before the first request needs them.
    """
    logger.info(f"Starting Rental Platform API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Business store backend: {settings.BUSINESS_STORE_BACKEND}")
    if not settings.sms_configured:
        logger.warning("Twilio not configured - SMS endpoints will return 500")
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("Stripe not configured - payment endpoints will return 500")

    yield

    logger.info("Shutting down Rental Platform API")


# Create FastAPI application
app = FastAPI(
    title="Rental Platform API",
    description="""
## Multi-tenant Equipment Rental API

Back end for rental businesses: onboarding, inventory, customer messaging
and payments.

### Features

- **Business onboarding** - analyze a website into a draft business profile
- **Inventory** - equipment CRUD with filters, full-text search and pagination
- **Customers and rentals** - customer records, bookings with availability checks
- **Notifications** - single, templated and paced bulk SMS (Twilio)
- **Payments** - Stripe PaymentIntents and webhook handling
- **Background jobs** - queue large SMS batches and poll their progress

Every error response has the shape
`{"success": false, "error": "...", "code": "VALIDATION_ERROR"}`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Businesses", "description": "Business profiles and dashboard stats"},
        {"name": "Equipment", "description": "Equipment inventory"},
        {"name": "Customers", "description": "Customer records"},
        {"name": "Rentals", "description": "Rental bookings"},
        {"name": "Notifications", "description": "SMS notifications"},
        {"name": "Payments", "description": "Stripe payment intents and webhooks"},
        {"name": "Analysis", "description": "Website analysis for onboarding"},
        {"name": "Tasks", "description": "Track background job progress"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(RentalPlatformException, rental_platform_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_envelope("Internal server error", ErrorKind.INTERNAL_ERROR),
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(businesses.router, prefix="/api", tags=["Businesses"])
app.include_router(equipment.router, prefix="/api/equipment", tags=["Equipment"])
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(rentals.router, prefix="/api/rentals", tags=["Rentals"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(analysis.router, prefix="/api", tags=["Analysis"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Rental Platform API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
