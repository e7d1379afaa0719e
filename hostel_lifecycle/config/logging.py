"""
Logging configuration for the hostel lifecycle backend.

Console output everywhere, rotating text logs, an error log, a JSON log
for shipping and a separate log for the daily sweeps.
"""

import os
import logging
import logging.config
from typing import Dict, Any
from pythonjsonlogger import jsonlogger
from datetime import datetime

from hostel_lifecycle.config.settings import settings

ROOT_LOGGER = "hostel_lifecycle"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 10

# Promoted into JSON records when callers pass them via `extra=`
CONTEXT_FIELDS = ("hostel_id", "semester_id", "subscription_id", "user_id", "job")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON records carrying the lifecycle identifiers of the event"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.utcnow().isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = settings.ENVIRONMENT

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = str(value)

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def _rotating(log_dir: str, filename: str, formatter: str, level: str = 'INFO') -> Dict[str, Any]:
    return {
        'level': level,
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': os.path.join(log_dir, filename),
        'maxBytes': MAX_LOG_BYTES,
        'backupCount': LOG_BACKUPS,
        'formatter': formatter,
        'encoding': 'utf8',
    }


def build_logging_config(log_dir: str = settings.LOG_DIR) -> Dict[str, Any]:
    """dictConfig payload for the current settings"""
    handlers: Dict[str, Any] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if settings.is_development() else 'standard',
        },
        'file': _rotating(log_dir, 'lifecycle.log', 'standard'),
        'error_file': _rotating(log_dir, 'lifecycle-error.log', 'standard', level='ERROR'),
        'sweep_file': _rotating(log_dir, 'sweeps.log', 'standard'),
    }
    package_handlers = ['console', 'file', 'error_file']
    if settings.LOG_JSON:
        handlers['json_file'] = _rotating(log_dir, 'lifecycle.json.log', 'json')
        package_handlers.append('json_file')

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s'
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': {
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {'handlers': ['console'], 'level': settings.LOG_LEVEL},
            ROOT_LOGGER: {'handlers': package_handlers, 'level': settings.LOG_LEVEL, 'propagate': False},
            # Sweep runs also land in their own file; records still reach the package handlers
            f'{ROOT_LOGGER}.tasks': {'handlers': ['sweep_file'], 'level': 'INFO', 'propagate': True},
            'sqlalchemy.engine': {'handlers': ['console', 'file'], 'level': 'WARNING', 'propagate': False},
            'celery': {'handlers': ['console', 'file'], 'level': 'INFO', 'propagate': False},
            'uvicorn': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        }
    }


def setup_logging() -> logging.Logger:
    """Configure logging once per process entry point (API app, Celery worker)"""
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings.LOG_DIR))
    logger = logging.getLogger(ROOT_LOGGER)
    logger.info(f"Logging initialized with level: {settings.LOG_LEVEL}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the package hierarchy.

    Module names (``hostel_lifecycle.services...``) are used as-is; short
    names such as a service class name are nested under ``services``.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.services.{name}"
    return logging.getLogger(name)
