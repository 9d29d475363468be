import logging
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from app.routers import auth, profiles, plans, admin_users, admin_billing, admin_listings, marketplace
from app.routers import reseller, admin_media, admin_banners, admin_templates, admin_settings
from app.routers import admin_system_config, smart_links, admin_diagnostics, sync
from app.routers import notifications, account_managers
from app.config import settings
from app.redis_client import close_redis


# Configure logging
if settings.log_format == "json":
    import json as json_mod

    class JsonFormatter(logging.Formatter):
        def format(self, record):
            log_data = {
                "timestamp": self.formatTime(record),
                "level": record.levelname,
                "message": record.getMessage(),
                "logger": record.name,
                "request_id": getattr(record, "request_id", None),
            }
            if record.exc_info:
                log_data["exception"] = self.formatException(record.exc_info)
            return json_mod.dumps(log_data)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.root.handlers = [handler]

logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger("nexo")


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_redis()


# Create FastAPI application
app = FastAPI(
    lifespan=lifespan,
    title="Nexo API",
    description="Subscriptions, marketplace inventory, media library and admin console for Nexo",
    version="1.0.0",
    debug=settings.debug,
)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(plans.router)
app.include_router(admin_users.router)
app.include_router(admin_billing.router)
app.include_router(admin_listings.router)
app.include_router(marketplace.router)
app.include_router(reseller.router)
app.include_router(reseller.admin_router)
app.include_router(admin_media.router)
app.include_router(admin_media.user_router)
app.include_router(admin_banners.router)
app.include_router(admin_banners.public_router)
app.include_router(admin_templates.router)
app.include_router(admin_templates.user_router)
app.include_router(admin_settings.router)
app.include_router(admin_settings.public_router)
app.include_router(admin_system_config.router)
app.include_router(smart_links.router)
app.include_router(smart_links.public_router)
app.include_router(admin_diagnostics.router)
app.include_router(sync.router)
app.include_router(notifications.router)
app.include_router(notifications.user_router)
app.include_router(account_managers.admin_router)
app.include_router(account_managers.router)

# Local storage backend serves uploaded objects directly
if settings.storage_backend == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=str(settings.upload_base_dir), check_dir=False),
        name="uploads",
    )


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=settings.debug)
