import logging
import sys


def setup_logging(level: str = "INFO"):
    """
    Configures the application's logging settings.
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
