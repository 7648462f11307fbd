"""logfmt output for the ``asana_client`` loggers."""

import logging
from typing import IO, Any, Iterable, List, Optional, Tuple

PACKAGE_LOGGER = "asana_client"

# Request and pagination extras, in output order.
LOG_EXTRA_FIELDS = (
    "resource",
    "method",
    "path",
    "status",
    "duration_ms",
    "page",
    "records",
    "error_type",
)


def logfmt_value(val: Any) -> str:
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, (int, float)):
        return str(val)
    s = str(val)
    if not s or any(c in s for c in ' ="'):
        s = '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return s


class LogfmtFormatter(logging.Formatter):
    """
    One ``key=value`` line per record: level, logger, event, then whichever
    of ``fields`` the record carries. Extras outside ``fields`` are not shown.
    """

    def __init__(
        self, fields: Iterable[str] = LOG_EXTRA_FIELDS, *, with_time: bool = False
    ):
        super().__init__()
        self.fields = tuple(fields)
        self.with_time = with_time

    def format(self, record: logging.LogRecord) -> str:
        pairs: List[Tuple[str, Any]] = []
        if self.with_time:
            pairs.append(("ts", self.formatTime(record, "%Y-%m-%dT%H:%M:%S")))
        pairs.append(("level", record.levelname.lower()))
        pairs.append(("logger", record.name))

        event = record.getMessage()
        if event:
            pairs.append(("event", event))

        for key in self.fields:
            val = getattr(record, key, None)
            if val is not None:
                pairs.append((key, val))

        if record.exc_info and record.exc_info[0] is not None:
            pairs.append(("exc_type", record.exc_info[0].__name__))

        return " ".join(f"{k}={logfmt_value(v)}" for k, v in pairs)


def setup_logging(
    level: str = "INFO",
    *,
    stream: Optional[IO[str]] = None,
    with_time: bool = False,
) -> logging.Logger:
    """
    Send ``asana_client.*`` records to ``stream`` (stderr by default) as
    logfmt. Safe to call again; the previous handler is replaced. The root
    logger is left alone.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(LogfmtFormatter(with_time=with_time))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return logger


__all__ = [
    "PACKAGE_LOGGER",
    "LOG_EXTRA_FIELDS",
    "LogfmtFormatter",
    "logfmt_value",
    "setup_logging",
]
