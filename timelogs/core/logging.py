import logging
import sys
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stdout handler to the root logger."""
    root = logging.getLogger()
    root.setLevel((level or "INFO").upper())
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
