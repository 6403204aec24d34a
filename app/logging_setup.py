from __future__ import annotations

import logging
import sys


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Send app logs to stderr with one timestamped format.

    Safe to call more than once; the handler is only installed the first time.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if any(getattr(h, "_task_service", False) for h in root.handlers):
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    handler._task_service = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # SQL echo is too chatty for INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
