import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from teams_timesheet.config import get_settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

# Components that also get their own rotating log file
COMPONENT_LOGS = {
    'teams_timesheet.services.timesheet_service': "timesheet_service.log",
    'teams_timesheet.services.graph_users_service': "graph.log",
    'teams_timesheet.utils.scheduler': "scheduler.log",
}


def _rotating_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(logs_dir: Path = Path("logs")) -> Path:
    """
    Configure logging for the timesheet API.
    Console output plus rotating files: app.log, one file per component
    listed in COMPONENT_LOGS, and errors.log for ERROR and above.
    """
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logs_dir.mkdir(exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Console handler (for container logs)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(logs_dir / "app.log", level, 10*1024*1024, 5))  # 10MB

    for logger_name, file_name in COMPONENT_LOGS.items():
        component_logger = logging.getLogger(logger_name)
        component_logger.handlers.clear()
        component_logger.addHandler(_rotating_handler(logs_dir / file_name, logging.DEBUG, 5*1024*1024, 3))  # 5MB
        component_logger.setLevel(logging.DEBUG)

    root_logger.addHandler(_rotating_handler(logs_dir / "errors.log", logging.ERROR, 5*1024*1024, 5))

    # Suppress noisy third-party loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('apscheduler').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Logging configuration completed")
    logger.info(f"Log files will be saved to: {logs_dir.absolute()}")

    return logs_dir


def get_log_files_info(logs_dir: Path = Path("logs")):
    """
    Get information about current log files for debugging.
    """
    if not logs_dir.exists():
        return {"status": "No logs directory found"}

    log_files = {}
    for log_file in logs_dir.glob("*.log"):
        try:
            stat = log_file.stat()
            log_files[log_file.name] = {
                "size_mb": round(stat.st_size / (1024*1024), 2),
                "modified": datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
            }
        except OSError as e:
            log_files[log_file.name] = {"error": str(e)}

    return log_files
