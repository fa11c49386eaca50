"""structlog configuration for the knowledge base.

One shared processor chain feeds either a console renderer (development)
or a JSON renderer (``APP_ENV=production`` or ``json_output=True``).  The
root stdlib logger is routed through the same chain, and the chatty
database / HTTP driver loggers are capped at WARNING so ingestion logs
stay readable at INFO.
"""

import logging
import sys

import structlog

# Driver loggers that emit per-request or per-command records at INFO/DEBUG.
NOISY_LOGGERS: tuple[str, ...] = ("pymongo", "asyncpg", "httpx", "httpcore", "openai")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(
    log_level: str = "INFO",
    app_env: str = "development",
    json_output: bool = False,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        app_env: Deployment environment; ``"production"`` selects JSON output.
        json_output: Force JSON output regardless of ``app_env``.

    Returns:
        The root structlog logger.
    """
    level = logging.getLevelName(log_level.upper())
    shared = _shared_processors()

    if json_output or app_env == "production":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return structlog.get_logger()


def get_logger(name: str, **initial_values: object) -> structlog.BoundLogger:
    """Return a structlog logger named *name*, bound to *initial_values*.

    Configures logging with defaults on first use if nothing else has.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name, **initial_values)
