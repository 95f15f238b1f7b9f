from __future__ import annotations

import logging
import os
import sys

from revision_routing.observability import NullMetrics, Observability, StdlibLogger

LOG_FILENAME = "revision-router.log"


class _FieldsFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "fields"):
            record.fields = {}
        return True


def bootstrap_observability(*, log_dir: str | None) -> Observability:
    _setup_logging(log_dir=log_dir)
    return Observability(
        logger=StdlibLogger(logging.getLogger("revision_routing")),
        metrics=NullMetrics(),
    )


def _setup_logging(*, log_dir: str | None) -> None:
    handler: logging.Handler
    if log_dir is None:
        handler = logging.StreamHandler(sys.stderr)
    else:
        os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(os.path.join(log_dir, LOG_FILENAME))
    handler.addFilter(_FieldsFilter())
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s | %(fields)s"
    )
    handler.setFormatter(formatter)
    logging.basicConfig(
        level=logging.WARNING if log_dir is None else logging.INFO,
        handlers=[handler],
    )
    logging.getLogger("revision_routing").setLevel(
        logging.WARNING if log_dir is None else logging.DEBUG
    )
