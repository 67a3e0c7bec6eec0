"""structlog configuration.

Learn: Modules just call structlog.get_logger() and log dotted events
("tasks.created", "auth.login_failed"). This module decides where the
lines go and how they look:

- the API server logs to stdout, console-rendered in development and
  JSON when TASKBOARD_LOG_JSON is on
- the CLI logs warnings and up to stderr, so command output (including
  --json) stays clean

The logger factory resolves the stream on every new logger instead of
capturing it once, so swapped streams (CliRunner, pytest capture) work.
"""

import logging
import sys

import structlog


def configure_logging(
    level: str = "INFO",
    *,
    json_output: bool = False,
    to_stderr: bool = False,
) -> None:
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=False)]

    def logger_factory(*args):
        return structlog.PrintLogger(sys.stderr if to_stderr else sys.stdout)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )
