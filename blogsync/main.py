import time

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from blogsync.core.db import init_db
from blogsync.core.logging import setup_logging
from blogsync.core.settings import get_settings
from blogsync.routers import articles, devto, linkedin

# Initialize
settings = get_settings()
logger = setup_logging()

# Create app
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="dev.to import and LinkedIn cross-posting for the blog",
)


# Request logging middleware with timing
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming HTTP requests with timing information."""
    start_time = time.perf_counter()

    logger.info(f">>> {request.method} {request.url.path}")

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start_time) * 1000
    response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

    method = request.method
    path = request.url.path
    status_code = response.status_code
    time_str = f"{duration_ms:.2f}ms"

    if duration_ms < 500:
        logger.info(f"<<< {method} {path} - {status_code} [{time_str}]")
    else:
        logger.warning(f"<<< {method} {path} - {status_code} [{time_str}] (very slow)")

    return response


# Stored assets; the directory is created on first upload
app.mount(
    "/uploads",
    StaticFiles(directory=settings.media_dir, check_dir=False),
    name="uploads",
)

app.include_router(devto.router)
app.include_router(articles.router)
app.include_router(linkedin.router)


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    logger.info("Starting up...")
    init_db()
    logger.info("Database initialized")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.app_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
