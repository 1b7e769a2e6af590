import logging
import logging.config
import os
from datetime import datetime
from app.core.config import settings

def setup_logging():
    """Setup application logging configuration"""

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    }
    root_handlers = ["console"]
    access_handlers = ["console"]
    worker_handlers = ["console"]

    if settings.LOG_TO_FILE:
        # Create logs directories if they don't exist
        for sub_dir in ("app", "access", "error", "celery"):
            os.makedirs(os.path.join(settings.LOG_DIR, sub_dir), exist_ok=True)

        # Get current date for log file naming
        current_date = datetime.now().strftime("%Y-%m-%d")

        def rotating(level: str, formatter: str, sub_dir: str) -> dict:
            return {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": formatter,
                "filename": os.path.join(settings.LOG_DIR, sub_dir, f"{sub_dir}-{current_date}.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 10,
            }

        handlers.update({
            "app_file": rotating(settings.LOG_LEVEL, "detailed", "app"),
            "error_file": rotating("ERROR", "detailed", "error"),
            "access_file": rotating("INFO", "access", "access"),
            "celery_file": rotating("INFO", "detailed", "celery"),
        })
        root_handlers = ["console", "app_file", "error_file"]
        access_handlers = ["access_file"]
        worker_handlers = ["celery_file", "console"]

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "format": "%(asctime)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {  # Root logger
                "level": settings.LOG_LEVEL,
                "handlers": root_handlers,
                "propagate": False,
            },
            "celery": {
                "level": "INFO",
                "handlers": worker_handlers,
                "propagate": False,
            },
            "app.workers": {
                "level": "INFO",
                "handlers": worker_handlers,
                "propagate": False,
            },
            "access": {
                "level": "INFO",
                "handlers": access_handlers,
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": access_handlers,
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",  # Reduce DB query noise
                "handlers": root_handlers,
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    # Log startup message
    logger = logging.getLogger(__name__)
    logger.info("Travel Agency Backend - Logging configured")
    logger.info(f"Log level: {settings.LOG_LEVEL}")
    if settings.LOG_TO_FILE:
        logger.info(f"Logs directory: {settings.LOG_DIR}/")
