"""Structured logging for Checkmate.

Check sessions log every attempt, so output has to stay greppable by
run_id / check_type. Production emits JSON lines, development emits a
console rendering. Standard library loggers (uvicorn, httpx, asyncio) go
through the same processor chain via ProcessorFormatter.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from checkmate import __version__

# Third-party loggers that are noisy while a check polls
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "asyncio": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


class AppContext:
    """Processor stamping service name, version and environment on events."""

    def __init__(self, environment: str):
        self.environment = environment

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", "checkmate")
        event_dict.setdefault("version", __version__)
        event_dict.setdefault("environment", self.environment)
        return event_dict


def _pre_chain(environment: str, production: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if production:
        # Console rendering stays compact; JSON consumers want every field
        processors.append(AppContext(environment))
        processors.append(structlog.processors.format_exc_info)
    return processors


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: DEBUG shows every attempt, INFO only session outcomes
        environment: "production" selects JSON output
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    production = environment.lower() == "production"
    pre_chain = _pre_chain(environment, production)
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if production
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(quiet_level, level))

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        renderer="json" if production else "console",
    )
