import logging
import sys

logger = logging.getLogger("twitter_api")


def setup_logging(should_debug: bool = False) -> None:
    """Attach a stderr handler to the package logger.

    Calling it more than once only updates the level.
    """
    logger.setLevel(logging.DEBUG if should_debug else logging.INFO)

    if any(getattr(h, "_twitter_api_handler", False) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )
    handler._twitter_api_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
