import logging
import logging.config
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple

from pythonjsonlogger import jsonlogger


INVOCATION_FIELDS: Tuple[str, ...] = ("action", "invocation_token", "scheme", "request_id")

# Libraries that are chatty at INFO
QUIET_LOGGERS: Tuple[str, ...] = ("mcp", "httpx", "asyncio")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["location"] = f"{record.module}.{record.funcName}:{record.lineno}"

        for field_name in INVOCATION_FIELDS:
            value = getattr(record, field_name, None)
            if value is not None:
                log_record[field_name] = value

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def get_logging_config(
    log_level: str = "INFO",
    json_format: bool = True,
    stream: str = "ext://sys.stdout",
) -> Dict[str, Any]:
    formatter = "json" if json_format else "standard"
    console = {
        "class": "logging.StreamHandler",
        "level": log_level,
        "stream": stream,
        "formatter": formatter,
    }

    loggers: Dict[str, Any] = {
        "xcode_build_server": {
            "handlers": ["console"],
            "level": log_level,
            "propagate": False,
        },
        "uvicorn": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(timestamp)s %(level)s %(name)s %(message)s",
            },
        },
        "handlers": {"console": console},
        "root": {"handlers": ["console"], "level": "WARNING"},
        "loggers": loggers,
    }


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    stream: str = "ext://sys.stdout",
) -> None:
    logging.config.dictConfig(get_logging_config(log_level, json_format, stream))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    def process(
        self,
        msg: str,
        kwargs: Dict[str, Any]
    ) -> tuple:
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def get_invocation_logger(
    action: str,
    invocation_token: str,
    scheme: Optional[str] = None,
) -> LoggerAdapter:
    extra: Dict[str, Any] = {"action": action, "invocation_token": invocation_token}
    if scheme:
        extra["scheme"] = scheme
    return LoggerAdapter(get_logger("xcode_build_server.invocation"), extra)
