"""
Shopping Bias Detector API — Main Application

POST /analyze            — Match a listing's signals against the bias catalog
GET  /biases             — List every bias rule and the signals it reads
GET  /biases/{rule_id}   — One bias rule and the signals it reads
GET  /options            — List the shopping-context checkboxes
GET  /currencies         — Reference currency table and current default
GET  /currencies/detect  — Best-effort currency for the calling client
GET  /health             — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from shopbias import __version__
from shopbias.analyzer import analyze_listing
from shopbias.catalog import (
    BIAS_CATALOG,
    CATALOG_VERSION,
    SHOPPING_OPTIONS,
    get_rule,
    get_rules,
)
from shopbias.config import settings
from shopbias.currency import CURRENCIES, get_currency
from shopbias.geolocation import currency_detector
from shopbias.logging import setup_logging, get_logger
from shopbias.signals import SignalRecord, is_ready, unknown_flags
from shopbias.schemas.analysis import (
    AnalyzeRequest,
    AnalyzeResponse,
    BiasCatalogResponse,
    BiasRuleResponse,
    OptionsResponse,
    CurrencyListResponse,
    CurrencyDetectResponse,
    HealthResponse,
)

logger = get_logger("api")

NOT_READY_DETAIL = "Enter item name and price to continue"


def _apply_headers(response):
    response.headers["X-ShopBias-Version"] = __version__
    response.headers["X-Catalog-Version"] = CATALOG_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and kick off background currency detection."""
    setup_logging()
    currency_detector.reset()
    currency_detector.start_background_detection()
    logger.info("Shopping Bias Detector API starting",
                extra={"catalog_version": CATALOG_VERSION})
    yield
    await currency_detector.shutdown()
    logger.info("Shopping Bias Detector API shutting down")


app = FastAPI(
    title="Shopping Bias Detector API",
    description="Quick check: are cognitive biases influencing your purchase?",
    version=f"{__version__} (catalog {CATALOG_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)


@app.get("/", include_in_schema=False)
async def root():
    return JSONResponse({"message": "Shopping Bias Detector API", "docs": "/docs"})


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    # Runs outside the middleware stack, so headers are applied here
    return _apply_headers(JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The analysis could not be completed."},
    ))


# ============================================================
# ROUTES
# ============================================================

@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest):
    """Analyze one listing for cognitive biases."""
    if not is_ready(request.item_name, request.price):
        raise HTTPException(422, NOT_READY_DETAIL)

    currency = currency_detector.default_currency
    if request.currency:
        currency = get_currency(request.currency)
        if currency is None:
            raise HTTPException(422, f"Unsupported currency: {request.currency}")

    ignored = unknown_flags(request.flags)
    if ignored:
        logger.info("Ignoring unrecognized flags", extra={"dropped_flags": ignored})

    record = SignalRecord.from_form(
        item_name=request.item_name.strip(),
        price=request.price,
        original_price=request.original_price,
        selected=request.flags,
    )
    result = analyze_listing(record, currency)
    result["ignored_flags"] = ignored

    logger.info(
        f"Analysis complete: {result['bias_count']} bias(es)",
        extra={
            "bias_count": result["bias_count"],
            "selected_count": result["selected_count"],
            "bias_ids": [b["id"] for b in result["biases"]],
            "currency": currency.code,
        },
    )
    return result


@app.get("/biases", response_model=BiasCatalogResponse)
async def get_biases():
    """Return the full bias catalog in display order."""
    rules = get_rules()
    return {
        "catalog_version": CATALOG_VERSION,
        "total": len(rules),
        "biases": rules,
    }


@app.get("/biases/{rule_id}", response_model=BiasRuleResponse)
async def get_bias(rule_id: str):
    """Return one bias rule and the signals it reads."""
    rule = get_rule(rule_id)
    if rule is None:
        raise HTTPException(404, f"Unknown bias: {rule_id}")
    return {**rule.to_dict(), "signals": list(rule.signals)}


@app.get("/options", response_model=OptionsResponse)
async def get_options():
    """Return the shopping-context checkboxes in display order."""
    return {
        "total": len(SHOPPING_OPTIONS),
        "options": [
            {"id": o.id, "label": o.label, "icon": o.icon} for o in SHOPPING_OPTIONS
        ],
    }


@app.get("/currencies", response_model=CurrencyListResponse)
async def get_currencies():
    return {
        "default": currency_detector.default_currency.to_dict(),
        "currencies": [c.to_dict() for c in CURRENCIES],
    }


@app.get("/currencies/detect", response_model=CurrencyDetectResponse)
async def detect_currency(request: Request):
    """Best-effort currency for the caller. Always answers, falling back to the default."""
    host = request.client.host if request.client else None
    detection = await currency_detector.detect_for_client(host)
    return detection.to_dict()


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "catalog_version": CATALOG_VERSION,
        "biases_tracked": len(BIAS_CATALOG),
        "shopping_scenarios": len(SHOPPING_OPTIONS),
        "default_currency": currency_detector.default_currency.code,
        "geolocation_enabled": currency_detector.enabled,
    }


# --- Body Size Limit Middleware ---
_MAX_BODY_BYTES = 65_536  # 64 KB; a form submission is tiny


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject oversized requests — guards both Content-Length and chunked bodies."""
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            if int(content_length) > _MAX_BODY_BYTES:
                return JSONResponse(
                    status_code=413,
                    content={"detail": "Request body too large."},
                )
        except ValueError:
            pass  # Malformed content-length; let the framework handle it

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > _MAX_BODY_BYTES:
            return JSONResponse(
                status_code=413,
                content={"detail": "Request body too large."},
            )

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


# --- Security + Version Headers Middleware ---
# Registered last so it wraps every other middleware, 413s included.
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security and version headers to all responses."""
    response = await call_next(request)
    return _apply_headers(response)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
