"""hnbrief entry point.

``run()`` takes no arguments and is what a scheduler or manual trigger
calls. ``main()`` is the console script: it configures logging and exits
non-zero when the run fails.
"""

import logging
import sys

from hnbrief.config import Settings
from hnbrief.digest.job import run_digest

logger = logging.getLogger(__name__)


def run() -> str:
    """Run one digest with settings from the environment."""
    settings = Settings.from_env()
    return run_digest(settings)


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, settings.log_level, logging.INFO),
    )
    try:
        result = run_digest(settings)
    except Exception:
        logger.exception("Digest run failed")
        sys.exit(1)
    logger.info("Process completed successfully: %s", result)


if __name__ == "__main__":
    main()
