"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formbuilder.config import get_settings
from formbuilder.database import Base, engine
from formbuilder.routers import templates, forms, steps, fields, submissions, public, ai, export
from formbuilder.services.validation import validation_failure

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Tables are created on startup; scripts/seed.py adds the starter templates
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Form Builder",
    description="Multi-step forms with templates, public links, submissions and AI-assisted generation",
    version="1.0.0",
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Answer malformed bodies and parameters with the same 400 shape as service errors."""
    failure = validation_failure(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, failure)
    return JSONResponse(status_code=failure.status_code, content={"detail": failure.detail})


# Include routers
app.include_router(templates.router, prefix="/api/templates", tags=["Templates"])
app.include_router(forms.router, prefix="/api/forms", tags=["Forms"])
app.include_router(steps.router, prefix="/api/steps", tags=["Steps"])
app.include_router(fields.router, prefix="/api/fields", tags=["Fields"])
app.include_router(submissions.router, prefix="/api/submissions", tags=["Submissions"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])
app.include_router(public.router, prefix="/api/public", tags=["Public"])
app.include_router(ai.router, prefix="/api/ai", tags=["AI Generation"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "form-builder-backend"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Form Builder API",
        "docs": "/docs",
        "health": "/health",
    }
