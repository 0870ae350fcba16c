import logging
import os
import sys

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder


def configure_logging(
    level: str = "DEBUG",
    json_logs: bool | None = None,
) -> None:
    """
    Configura structlog + logging da stdlib.

    - `json_logs` (ou a env `JSON_LOGS`) liga o JSONRenderer de produção;
      sem ele, ConsoleRenderer colorido para desenvolvimento.
    - Deve ser chamado antes de qualquer import que crie loggers.
    """
    if json_logs is None:
        json_logs = os.getenv("JSON_LOGS", "").lower() in {"1", "true", "yes"}

    # Pré-processors comuns a stdlib e structlog
    pre_chain = [
        structlog.contextvars.merge_contextvars,     # request_id, beneficiary_id etc.
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    final_processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            *pre_chain,
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.PATHNAME,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=final_processor,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    # requests/urllib3 são verbosos em DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.captureWarnings(True)
