from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from store_rating.api import auth, admin, user, store
from store_rating.core.config import settings
from store_rating.core.errors import register_exception_handlers
from store_rating.core.metrics import request_count, request_duration, db_connected, get_metrics_text
from store_rating.db.session import init_db, close_db, ping
import time
import logging

logger = logging.getLogger(__name__)
logging.getLogger("store_rating").setLevel(settings.LOG_LEVEL)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        status = 500
        
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=status
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(time.time() - start_time)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")
    
    engine = await init_db(app)
    if await ping(engine):
        db_connected.set(1)
        logger.info("Database connected")
    else:
        db_connected.set(0)
        logger.error("Database not reachable at startup")
    
    yield
    
    logger.info("Application shutting down...")
    await close_db(app)
    db_connected.set(0)
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)
app.include_router(user.router, prefix=settings.API_PREFIX)
app.include_router(store.router, prefix=settings.API_PREFIX)


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


async def _database_ready(request: Request) -> bool:
    engine = getattr(request.app.state, "engine", None)
    ready = engine is not None and await ping(engine)
    db_connected.set(1 if ready else 0)
    return ready


@app.get("/health", tags=["monitoring"])
async def health_check(request: Request):
    db_healthy = await _database_ready(request)
    
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "database": "connected" if db_healthy else "disconnected"
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check(request: Request):
    if not await _database_ready(request):
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Database not available"}
        )
    
    return {
        "ready": True,
        "service": settings.API_TITLE
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
