"""Process-wide logging setup for the API and CLI entry points."""

import logging
import sys
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Log to stdout and quiet the HTTP client loggers."""
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True,
    )

    # Quiet down chatty loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
