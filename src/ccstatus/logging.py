import logging

import structlog


def setup_logging(level: "str", log_file: "str" = "") -> "None":
    """
    maps string log level to logging module levels and configures
    structlog with a simple console renderer and timestamping.
    Output goes to stderr (or log_file) since stdout carries the
    rendered status line.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    handler_kwargs: "dict[str, str]" = {}
    if log_file:
        handler_kwargs["filename"] = log_file

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        **handler_kwargs,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=not log_file),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
