from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from teams_timesheet.routers import manager_router, project_router, timesheet_router, user_router
from teams_timesheet.database import init_db
from teams_timesheet.services.graph_users_service import GraphRequestError
from teams_timesheet.utils.scheduler import TaskScheduler
from teams_timesheet.utils.logging_config import setup_logging, get_log_files_info
from teams_timesheet.config import get_settings
import httpx
import logging

# Setup comprehensive logging
logs_dir = setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()
scheduler = TaskScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Teams Timesheet API...")
    init_db()
    scheduler.start()
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    scheduler.stop()
    logger.info("Application stopped")


app = FastAPI(
    title="Teams Timesheet",
    description="Timesheet logging, approval and project utilization for Microsoft Teams",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(timesheet_router.router)
app.include_router(manager_router.router)
app.include_router(project_router.router)
app.include_router(user_router.router)


@app.exception_handler(httpx.HTTPStatusError)
async def graph_status_error_handler(request: Request, exc: httpx.HTTPStatusError):
    logger.error(f"Microsoft Graph returned {exc.response.status_code} for {request.url.path}")
    return JSONResponse(status_code=502, content={"detail": "Directory service request failed"})


@app.exception_handler(GraphRequestError)
async def graph_batch_error_handler(request: Request, exc: GraphRequestError):
    logger.error(f"Microsoft Graph batch step failed for {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=502, content={"detail": "Directory service request failed"})


@app.get("/")
async def root():
    return {
        "message": "Teams Timesheet API",
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "database": "connected",
        "scheduler": "running" if scheduler.scheduler.running else "disabled"
    }


@app.get("/logs/info")
async def logs_info():
    """Get information about current log files."""
    return {
        "logs_directory": str(logs_dir.absolute()),
        "log_files": get_log_files_info()
    }
