from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from luxuryhomes.api.routers import properties, users
from luxuryhomes.api.dependencies import get_property_collection
from luxuryhomes.core.config import settings
from luxuryhomes.core.database import init_db
from luxuryhomes.core.exceptions import DiscoveryError
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="LuxuryHomes Discovery API",
    description="Browse, filter, submit and favorite property listings",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(properties.router, prefix="/api/v1/properties", tags=["properties"])
app.include_router(users.router, prefix="/api/v1/users", tags=["users"])


@app.exception_handler(DiscoveryError)
async def discovery_error_handler(request: Request, exc: DiscoveryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    try:
        init_db()
        await get_property_collection().initialize()
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    try:
        await get_property_collection().finalize()
        logger.info("Application shutdown completed successfully")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


@app.get("/")
async def root():
    return {"message": "LuxuryHomes Discovery API"}


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies the property collection"""
    health_status = {
        "status": "healthy",
        "services": {}
    }

    collection_healthy = await get_property_collection().health_check()
    health_status["services"]["property_collection"] = "healthy" if collection_healthy else "unhealthy"
    if not collection_healthy:
        health_status["status"] = "degraded"

    return health_status
