"""Console logging for the hotfixmirror command line."""

from __future__ import annotations

import logging

# per-request chatter from the HTTP stack
_QUIET_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, verbose: bool = False) -> None:
    """Log INFO and above to stderr; ``verbose`` adds DEBUG records from hotfixmirror only."""

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("hotfixmirror").setLevel(logging.DEBUG if verbose else logging.INFO)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
