import logging
import sys

from config.settings import settings

_configured = False


def configure_logging(level: str = None) -> None:
    """Attach one stdout handler to the root logger. Safe to call twice."""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(level or settings.LOG_LEVEL)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.handlers.clear()
    root.addHandler(handler)
    _configured = True
