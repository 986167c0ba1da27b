import logging

from config import LOG_LEVEL


def setup_logging() -> None:
    """Configure the root logger once at process start."""
    root = logging.getLogger()

    # Repeated calls (reloads, test imports) must not stack handlers
    if root.handlers:
        return

    root.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    root.addHandler(handler)
