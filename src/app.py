"""Storefront Preorders FastAPI application.

Serves the admin preorder report (list, CSV export, soft delete, variant
sellability) and the storefront preorder checkout. Every request under
/admin and /store runs inside the preorders domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied:
#   - default/"test" → event_processing = "sync"  (follow-up handler fires in UoW)
#   - "production"   → event_processing = "async" (handler fires via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from preorders.domain import preorders
from preorders.utils.logging import add_context, clear_context

preorders.init()

_DOMAIN_PREFIXES = ("/admin", "/store")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront Preorders API",
    description="Preorder checkout, reporting and follow-up for the storefront",
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
    """Push the preorders domain context for admin and storefront requests."""
    if not request.url.path.startswith(_DOMAIN_PREFIXES):
        return await call_next(request)

    add_context(request_id=request.headers.get("x-request-id", str(uuid.uuid4())))
    try:
        with preorders.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from preorders.api.routes import admin_router, store_router  # noqa: E402

app.include_router(admin_router)
app.include_router(store_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": preorders.name})
