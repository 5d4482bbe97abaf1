"""Storefront FastAPI application.

Processes commands synchronously per HTTP request, each inside the
storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from pyproject.toml:
#   - unset/"test" → memory provider, sync event processing
#   - "production" → PostgreSQL, Redis broker, async event processing
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import storefront
from storefront.utils.logging import bind_request_context, clear_request_context, configure_logging

configure_logging()
storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Leathercraft Storefront API",
    description="Catalogue, cart, checkout, orders and stock ledger",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind the caller to the request's log lines."""
    clear_request_context()
    bind_request_context(
        path=request.url.path,
        method=request.method,
        user_id=request.headers.get("x-user-id"),
    )
    with storefront.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import (  # noqa: E402
    cart_router,
    install_error_handlers,
    order_router,
    product_router,
    shipping_router,
)

app.include_router(cart_router)
app.include_router(shipping_router)
app.include_router(order_router)
app.include_router(product_router)
install_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
