import logging.config
import structlog
from pythonjsonlogger import jsonlogger
import coloredlogs

from core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

FIELD_STYLES = {
    'asctime': {'color': 'green'},
    'levelname': {'bold': True, 'color': 'cyan'},
    'name': {'color': 'white'},
    'message': {'color': 'white'}
}

LEVEL_STYLES = {
    'DEBUG': {'color': 'blue'},
    'INFO': {'color': 'green'},
    'WARNING': {'color': 'yellow'},
    'ERROR': {'color': 'red'},
    'CRITICAL': {'bold': True, 'color': 'red'}
}


def build_formatter(log_format: str) -> dict:
    """dictConfig formatter for LOG_FORMAT: JSON lines or colored console output"""
    if log_format == "json":
        return {"()": jsonlogger.JsonFormatter, "fmt": LOG_FORMAT}
    return {
        "()": coloredlogs.ColoredFormatter,
        "fmt": LOG_FORMAT,
        "field_styles": FIELD_STYLES,
        "level_styles": LEVEL_STYLES,
    }


def setup_logging():
    settings = get_settings()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": build_formatter(settings.LOG_FORMAT)},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default"
            }
        },
        "root": {
            "handlers": ["default"],
            "level": settings.LOG_LEVEL
        },
    })

    # Post events go through structlog and reach the handler above as key=value text
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(
                key_order=["event"], drop_missing=True
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
