#!/usr/bin/env python3
"""
DevinOut API - FastAPI Application

Business/freelancer team matching: project intake, tiered team offers,
invitations, replacements, project chat and in-app notifications.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI, HTTPException

from core.config_loader import get_config
from core.errors import ServiceException
from .exceptions import (
    service_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import (
    users_router,
    freelancers_router,
    projects_router,
    teams_router,
    invitations_router,
    chat_router,
    notifications_router
)
from .routers.chat import add_rate_limit_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="DevinOut API",
    description="Match businesses with designer+developer teams",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

add_rate_limit_handlers(app)

# Register exception handlers
app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(users_router)
app.include_router(freelancers_router)
app.include_router(projects_router)
app.include_router(teams_router)
app.include_router(invitations_router)
app.include_router(chat_router)
app.include_router(notifications_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "devinout-api"}


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting DevinOut API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
