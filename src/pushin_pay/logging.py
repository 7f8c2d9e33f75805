import logging
import sys
from typing import IO, Literal

import structlog


LIBRARY_LOGGER = "pushin_pay"

# Marks handlers installed here so reconfiguring replaces only them.
_HANDLER_MARK = "_pushin_pay_handler"


def _renderer(log_format: Literal["json", "console"]) -> structlog.typing.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: str = "INFO",
    log_format: Literal["json", "console"] = "json",
    *,
    take_over_root: bool = False,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Render the client's structlog events through stdlib logging.

    The library never calls this itself. By default only the ``pushin_pay``
    logger gets a handler and stops propagating, so the host application's
    own handlers and levels are left alone. With ``take_over_root=True`` the
    handler goes on the root logger instead, which suits scripts, and the
    chatty transport loggers are capped at WARNING.

    Calling it again swaps the handler it installed earlier and keeps every
    other handler. Returns the installed handler.
    """
    shared_processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )
    setattr(handler, _HANDLER_MARK, True)

    root_logger = logging.getLogger()
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    for logger in (root_logger, library_logger):
        _remove_installed_handlers(logger)

    if take_over_root:
        root_logger.addHandler(handler)
        root_logger.setLevel(level.upper())
        library_logger.setLevel(logging.NOTSET)
        library_logger.propagate = True
        for noisy in ("httpx", "httpcore"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
    else:
        library_logger.addHandler(handler)
        library_logger.setLevel(level.upper())
        library_logger.propagate = False

    return handler


def _remove_installed_handlers(logger: logging.Logger) -> None:
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_MARK, False)]:
        logger.removeHandler(handler)
        handler.close()
