# main.py
"""
FastAPI entry point for the HomeCook marketplace API.
Startup picks the document store (in-memory or Supabase) and records its
health, request-id middleware logs every call, and core errors are mapped to
a consistent JSON error shape.
"""
import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from homecook.api.cooks import router as cooks_router
from homecook.api.meals import router as meals_router
from homecook.api.orders import router as orders_router
from homecook.api.reviews import router as reviews_router
from homecook.config.settings import settings
from homecook.config.supabase import SupabaseClient
from homecook.services.errors import HomeCookError
from homecook.store.base import DocumentStore
from homecook.store.memory import InMemoryDocumentStore
from homecook.store.supabase_store import SupabaseDocumentStore

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("uvicorn.error")

HEALTH_CHECK_TIMEOUT = settings.health_check_timeout


async def _run_sync_in_executor(fn, *args, timeout: float = HEALTH_CHECK_TIMEOUT):
    """
    Helper to run blocking sync functions in the default threadpool with a timeout.
    Returns the function's result or raises TimeoutError.
    """
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(loop.run_in_executor(None, fn, *args), timeout=timeout)


def build_store() -> DocumentStore:
    if settings.store_backend == "supabase":
        return SupabaseDocumentStore(SupabaseClient(settings))
    return InMemoryDocumentStore()


async def _store_healthy(store: DocumentStore, timeout: float = HEALTH_CHECK_TIMEOUT) -> bool:
    try:
        return bool(await _run_sync_in_executor(store.health_check, timeout=timeout))
    except asyncio.TimeoutError:
        logger.warning("Store health_check timed out after %.1fs", timeout)
        return False
    except Exception as exc:
        logger.exception("Unexpected error calling store health_check: %s", exc)
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting HomeCook API (store=%s)", settings.store_backend)
    # tests may pre-seed app.state.store
    if getattr(app.state, "store", None) is None:
        app.state.store = build_store()
    app.state.store_healthy = await _store_healthy(app.state.store)
    logger.info("Store health: %s", app.state.store_healthy)
    try:
        yield
    finally:
        logger.info("Shutting down HomeCook API...")


app = FastAPI(
    title="HomeCook - home cooked meal marketplace",
    description="Meals, orders and reviews between home cooks and customers",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # lock down in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = request_id
    logger.info("→ Incoming request %s %s id=%s", request.method, request.url.path, request_id)
    try:
        response: Response = await call_next(request)
    except Exception as exc:
        logger.exception("Handler error for request id=%s: %s", request_id, exc)
        return JSONResponse(
            {"ok": False, "status": 500, "error": "internal_error", "message": "Internal server error"},
            status_code=500,
        )
    logger.info("← Completed request id=%s status=%s", request_id, getattr(response, "status_code", None))
    response.headers["X-Request-Id"] = request_id
    return response


@app.exception_handler(HomeCookError)
async def homecook_error_handler(request: Request, exc: HomeCookError):
    logger.info(
        "Request %s %s rejected: %s (%s)", request.method, request.url.path, exc.code, exc.message
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


app.include_router(orders_router, prefix="/orders", tags=["orders"])
app.include_router(meals_router, prefix="/meals", tags=["meals"])
app.include_router(cooks_router, prefix="/cooks", tags=["cooks"])
app.include_router(reviews_router, prefix="/reviews", tags=["reviews"])


@app.get("/")
async def root() -> Dict[str, str]:
    return {"message": "HomeCook API is running!", "status": "healthy"}


@app.get("/health")
async def health_check():
    """Liveness: process is up; reports degraded if the store is unreachable."""
    store = getattr(app.state, "store", None)
    ok = store is not None and await _store_healthy(store)
    return JSONResponse(
        {
            "status": "healthy" if ok else "degraded",
            "service": "homecook",
            "store": settings.store_backend,
            "database": "connected" if ok else "disconnected",
        },
        status_code=200 if ok else 503,
    )


@app.get("/ready")
async def readiness_check():
    """Readiness: uses the state cached at startup when available."""
    state: Optional[bool] = getattr(app.state, "store_healthy", None)
    if state is None:
        store = getattr(app.state, "store", None)
        state = store is not None and await _store_healthy(store, timeout=2.0)
    if state:
        return JSONResponse({"ready": True, "database": "connected"}, status_code=200)
    return JSONResponse({"ready": False, "database": "disconnected"}, status_code=503)


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run("main:app", host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", 5000)), reload=True)
