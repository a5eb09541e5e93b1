import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from corpreg import __version__
from corpreg.config import settings
from corpreg.database import init_db
from corpreg.routers import companies, export, fiscal_years

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create missing tables before the first request"""
    init_db()
    yield


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="법인 및 사업연도 관리: registration number checks, fiscal year overlap validation and CSV export",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(companies.router, prefix="/api/companies", tags=["companies"])
app.include_router(fiscal_years.router, prefix="/api/fiscal-years", tags=["fiscal-years"])
app.include_router(export.router, prefix="/api/export", tags=["export"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "corpreg API",
        "version": __version__,
        "features": [
            "Company lookup by name or registration number",
            "Registration number format and checksum checks",
            "Fiscal year duplicate and overlap validation",
            "CSV export",
        ],
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
