import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import config
from .core.errors import RateLimited, StorefrontError
from .routers import auth, catalog

logging.getLogger("apps.storefront").setLevel(config.LOG_LEVEL)

app = FastAPI(title="Košnica Storefront API", version="1.0.0")

# Allow the storefront frontend (local dev or deployed) to call the API.
allow_origins = [o.strip() for o in config.CORS_ALLOW_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    headers = {}
    if isinstance(exc, RateLimited):
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
        headers=headers or None,
    )


@app.get("/")
def root() -> dict[str, str]:
    """Provide a friendly landing response for the API root."""
    return {
        "message": "Košnica Storefront API is running. Visit /docs for the OpenAPI UI.",
        "health": "/healthz",
    }


@app.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    """Return an empty response to suppress missing favicon errors in development."""
    return Response(status_code=204)

app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])


@app.get("/healthz")
def healthcheck() -> dict[str, str]:
    """Basic healthcheck endpoint for orchestration and tests."""
    return {"status": "ok"}
