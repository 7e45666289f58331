from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from redis.exceptions import RedisError
from contextlib import asynccontextmanager
import logging
import secrets

from storefront.config import settings
from storefront.database import init_db, close_db, async_session_maker
from storefront.services.settings_service import settings_service
from storefront.core.exceptions import StorefrontError
from storefront.core.websocket import connection_manager, cart_room, ADMIN_ROOM
from storefront.core.redis import init_redis, close_redis
from storefront.core.rate_limit import limiter

# Import routers
from storefront.api import cart, orders, products, settings as store_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Reduce SQLAlchemy log verbosity
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(f"Starting {settings.APP_NAME} API...")

    await init_db()
    await init_redis()

    async with async_session_maker() as db:
        await settings_service.initialize_default_settings(db)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down...")
    await close_redis()
    await close_db()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Storefront API - cart pricing, WhatsApp checkout and order management",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RedisError)
async def cart_storage_error_handler(request: Request, exc: RedisError):
    logger.error(f"{request.method} {request.url.path} -> cart storage unavailable: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Cart storage is temporarily unavailable"})


# Include routers
app.include_router(products.router, prefix=f"{settings.API_V1_PREFIX}/products", tags=["Products"])
app.include_router(cart.router, prefix=f"{settings.API_V1_PREFIX}/cart", tags=["Cart"])
app.include_router(orders.router, prefix=f"{settings.API_V1_PREFIX}/orders", tags=["Orders"])
app.include_router(store_settings.router, prefix=f"{settings.API_V1_PREFIX}/settings", tags=["Settings"])


@app.get("/")
async def root():
    response = {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }
    if settings.DEBUG:
        response["docs"] = "/docs"
    return response


@app.get("/health")
async def health_check():
    """Health check endpoint with database connectivity check"""
    from sqlalchemy import text
    from storefront.core.redis import redis_client

    health_status = {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION
    }

    try:
        async with async_session_maker() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"] = f"disconnected: {str(e)}"
        logger.error(f"Health check failed: {e}")

    health_status["redis"] = "connected" if redis_client.is_connected else "in-memory"
    health_status["websocket_connections"] = connection_manager.get_connection_count()

    return health_status


async def _serve_room(websocket: WebSocket, room_name: str):
    await connection_manager.connect(websocket, room_name)
    try:
        while True:
            data = await websocket.receive_json()
            if data.get("type") == "ping":
                await connection_manager.send_personal_message(
                    {"type": "pong", "timestamp": data.get("timestamp")},
                    websocket
                )
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error in room {room_name}: {e}")
    finally:
        connection_manager.disconnect(websocket)


@app.websocket("/ws/cart/{session_id}")
async def cart_websocket(websocket: WebSocket, session_id: str):
    """
    Live cart updates.
    Sends {"event": "cartUpdated"} after every change; clients re-read GET /cart.
    """
    await _serve_room(websocket, cart_room(session_id))


@app.websocket("/ws/admin")
async def admin_websocket(websocket: WebSocket, key: str = ""):
    """New order notifications for the admin panel"""
    authorized = bool(settings.ADMIN_API_KEY) and secrets.compare_digest(
        key.encode(), settings.ADMIN_API_KEY.encode()
    )
    if not authorized:
        await websocket.close(code=1008)
        return
    await _serve_room(websocket, ADMIN_ROOM)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
