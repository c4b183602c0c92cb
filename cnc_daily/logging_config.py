"""JSON logging for CNC Daily.

Every record is one JSON object on stdout. Keyword arguments given to an
``ExecutionLogger`` call become top-level keys of that object, next to the
run's ``execution_id`` and the emitting ``component``.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

ROOT_LOGGER = "cnc_daily"

# Attributes every LogRecord carries; anything else on a record came in as extra.
RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}

# Keyword arguments the logging module itself understands.
LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel")


def extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in RESERVED_ATTRS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Formats a record and all of its extras as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(extract_extras(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class ExecutionLogger(logging.LoggerAdapter):
    """Adapter that tags records with the run id and component name.

    Any keyword argument that is not one of the logging module's own
    (``exc_info``, ``stack_info``, ``stacklevel``, ``extra``) is moved into
    the record's extras:

        logger.warning("Summary rejected", category="Art", flagged={"TOXICITY": 0.7})
    """

    def __init__(self, execution_id: str, component: str = "main"):
        super().__init__(
            logging.getLogger(f"{ROOT_LOGGER}.{component}"),
            {"execution_id": execution_id, "component": component},
        )
        self.start_time: datetime | None = None

    @property
    def execution_id(self) -> str:
        return self.extra["execution_id"]

    @property
    def component(self) -> str:
        return self.extra["component"]

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        logging_kwargs = {key: kwargs.pop(key) for key in LOGGING_KWARGS if key in kwargs}
        extra = {**self.extra, **kwargs.pop("extra", {})}
        for key, value in kwargs.items():
            # a clash with a LogRecord attribute would make the logging module raise
            extra[f"{key}_" if key in RESERVED_ATTRS else key] = value
        return msg, {**logging_kwargs, "extra": extra}

    def log_execution_start(self, **kwargs) -> None:
        self.start_time = datetime.now(UTC)
        self.info(
            f"Starting {self.component} execution",
            execution_start=self.start_time.isoformat(),
            **kwargs,
        )

    def log_execution_end(self, success: bool = True, **kwargs) -> None:
        """Log the end of a run, with its duration if the start was logged."""
        end_time = datetime.now(UTC)
        duration_seconds = None
        if self.start_time:
            duration_seconds = (end_time - self.start_time).total_seconds()

        self.log(
            logging.INFO if success else logging.ERROR,
            f"Completed {self.component} execution",
            execution_end=end_time.isoformat(),
            execution_duration_seconds=duration_seconds,
            execution_success=success,
            **kwargs,
        )

    def log_feed_processing(self, feed_url: str, items_count: int) -> None:
        self.info(
            f"Processed feed: {items_count} items found",
            feed_url=feed_url,
            items_count=items_count,
        )

    def log_category_outcome(
        self, category: str, outcome: str, item_title: str | None = None, **kwargs
    ) -> None:
        """Log the terminal state of a category.

        Published and no-feed outcomes are routine and logged at INFO;
        every other skip or failure is a WARNING.
        """
        level = logging.INFO if outcome in ("published", "skipped_no_feed") else logging.WARNING
        self.log(
            level,
            f"Category {category}: {outcome}",
            category=category,
            outcome=outcome,
            item_title=item_title,
            **kwargs,
        )

    def log_metrics(self, metrics: dict[str, Any]) -> None:
        self.info("Execution metrics", metrics=metrics)


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Send JSON lines for every ``cnc_daily`` logger to stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    # component loggers inherit this level
    logging.getLogger(ROOT_LOGGER).setLevel(level)


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)
    """
    if not execution_id:
        execution_id = f"exec_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ExecutionLogger(execution_id, component)
