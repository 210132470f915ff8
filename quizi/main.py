"""
Quizi API - Main Application
Timed multiple-choice quiz backed by Open Trivia DB and MongoDB
FILE: main.py
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import time

import httpx

from quizi.core.config import settings
from quizi.db.mongodb import MongoDB, StoreError, StoreNotConnectedError
from quizi.api.quiz import router as quiz_router
from quizi.services.trivia_client import TriviaClient

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("🚀 Starting Quizi API...")

    mongodb = MongoDB(
        settings.mongo_uri,
        settings.mongo_dbname,
        timeout_ms=settings.mongo_timeout_ms
    )
    await mongodb.connect()
    logger.info("✓ MongoDB connected")

    http_client = httpx.AsyncClient(timeout=settings.trivia_timeout_seconds)

    app.state.mongodb = mongodb
    app.state.trivia_client = TriviaClient(http_client, api_url=settings.trivia_api_url)
    logger.info("✓ All connections initialized")

    yield

    logger.info("🛑 Shutting down Quizi API...")
    try:
        await http_client.aclose()
    except Exception as e:
        logger.error(f"❌ Failed to close trivia HTTP client: {e}")

    try:
        await mongodb.close()
    except Exception as e:
        logger.error(f"❌ Failed to close MongoDB connection: {e}")

    logger.info("✓ Cleanup complete")


app = FastAPI(
    title="Quizi API",
    description="""
    Timed multiple-choice quiz API.

    ## Endpoints
    - **Start**: `POST /api/start` - create a 30 minute session with 15 questions
    - **Submit**: `POST /api/submit` - record answers and get the score
    - **Report**: `GET /api/report/{sessionId}` - full report with correct answers
    - **Summary**: `GET /api/report/{sessionId}/summary` - report analytics
    - **Health**: `/health` - service health check
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000
    response.headers["X-Process-Time-Ms"] = str(round(process_time, 2))
    return response


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    logger.info(f"📨 {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(
        f"📤 {request.method} {request.url.path} - "
        f"Status: {response.status_code}"
    )
    return response


# ==================== ERROR ENVELOPE ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Errors are always {"message": ...}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema failures are client errors (400), not 422"""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid").removeprefix("Value error, ")
        problems.append(f"{location}: {message}" if location else message)

    logger.warning(f"⚠️ Rejected payload on {request.url.path}: {problems}")

    if problems and all(p.startswith("email:") for p in problems):
        message = "Invalid email"
    else:
        message = "Invalid request payload: " + "; ".join(problems)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message}
    )


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    """Store failures raised outside a route body (e.g. in dependencies)"""
    logger.error(f"❌ Store error on {request.url.path}: {exc}")
    if isinstance(exc, StoreNotConnectedError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": "Session store unavailable"}
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"}
    )


# ==================== INCLUDE ROUTERS ====================

app.include_router(quiz_router)


# ==================== ROOT ENDPOINTS ====================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Quizi API",
        "version": app.version,
        "status": "operational",
        "endpoints": {
            "docs": "/docs",
            "start": "/api/start",
            "submit": "/api/submit",
            "report": "/api/report/{sessionId}",
            "summary": "/api/report/{sessionId}/summary",
            "health": "/health"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check

    Returns 200 when MongoDB answers a ping, 503 otherwise
    """
    mongodb = getattr(request.app.state, "mongodb", None)
    mongo_ok = mongodb is not None and await mongodb.ping()

    health_status = {
        "status": "healthy" if mongo_ok else "degraded",
        "ok": mongo_ok,
        "timestamp": time.time(),
        "components": {
            "mongodb": {
                "status": "healthy" if mongo_ok else "unhealthy",
                "message": "Connected and responsive" if mongo_ok else "Not connected"
            }
        }
    }

    return JSONResponse(
        status_code=200 if mongo_ok else 503,
        content=health_status
    )


# ==================== RUN APPLICATION ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "quizi.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
