from __future__ import annotations
import logging, sys
import structlog
import structlog.stdlib

# these log full request URLs, and every Bot API URL carries the bot token
QUIET_LOGGERS = ("httpx", "httpcore")

def configure_logging(level: str = "INFO"):
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO
    timestamper = structlog.processors.TimeStamper(fmt="iso")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            timestamper,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
    # uvicorn/sqlalchemy records go through the stdlib root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=[
            timestamper,
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("message"),
        ],
    ))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
