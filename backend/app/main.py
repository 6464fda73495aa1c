import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.invoices import router as invoices_router
from app.core.config import get_settings
from app.utils.rate_limit import get_client_ip, rate_limiter

settings = get_settings()

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An internal error occurred"

app = FastAPI(
    title="Freight Invoice Extraction API",
    version="1.0.0",
    docs_url="/docs" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.openapi_enabled else None,
)


@app.on_event("startup")
async def _startup_checks():
    current = get_settings()
    errors = current.validate_required_config()
    if not errors:
        logger.info("Invoice extraction ready (mode=%s, model=%s)", current.ai_invoice_mode, current.ai_invoice_model)
        return
    if current.is_production:
        raise RuntimeError("Configuration validation failed in production environment: " + "; ".join(errors))
    for error in errors:
        logger.warning("Configuration problem: %s", error)


if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

app.include_router(invoices_router, prefix="/api/v1", tags=["invoices"])


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Hide internal details for 5xx in production unless explicitly enabled.
    if exc.status_code >= 500 and not get_settings().expose_error_details:
        return JSONResponse(status_code=exc.status_code, content={"detail": GENERIC_ERROR_MESSAGE})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    if get_settings().expose_error_details:
        return JSONResponse(status_code=500, content={"detail": str(exc)})
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR_MESSAGE})


@app.middleware("http")
async def api_rate_limit_middleware(request: Request, call_next):
    if request.method == "OPTIONS":
        return await call_next(request)

    if not request.url.path.startswith("/api/v1"):
        return await call_next(request)

    current = get_settings()
    if not current.rate_limit_api_enabled:
        return await call_next(request)

    ip = get_client_ip(request) or "unknown"
    allowed, _ = rate_limiter.allow(f"api:ip:{ip}", current.rate_limit_api_per_min, 60)
    if not allowed:
        logger.warning("Rate limit hit for %s on %s", ip, request.url.path)
        return JSONResponse(status_code=429, content={"success": False, "error": "Too many requests. Please slow down."})

    return await call_next(request)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    if not get_settings().security_headers_enabled:
        return response

    headers = response.headers
    if "X-Content-Type-Options" not in headers:
        headers["X-Content-Type-Options"] = "nosniff"
    if "X-Frame-Options" not in headers:
        headers["X-Frame-Options"] = "DENY"
    if "Referrer-Policy" not in headers:
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if "Cache-Control" not in headers:
        headers["Cache-Control"] = "no-store"

    return response


@app.get("/health")
async def health_check():
    return {"status": "ok", "mode": get_settings().ai_invoice_mode}
