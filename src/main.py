import logging
import sys

from . import config
from .dragdrop.session import BrowserSession
from .dragdrop.plan_reader import PlanReader
from .dragdrop.runner import PlanRunner


def main(argv=None):

    argv = sys.argv[1:] if argv is None else argv
    logger = setup_logging(verbose_console="-v" in argv)
    plan_path = next((a for a in argv if not a.startswith("-")), config.PLAN_PATH)

    reader = PlanReader(logger)
    try:
        plans = reader.read_path(plan_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load drag plans: %s", e)
        return 2

    if not plans:
        logger.warning("No drag plans found at %s", plan_path)
        return 0

    session = BrowserSession(logger)
    try:
        summary = PlanRunner(session).run_all(plans)
    except Exception as e:
        logger.error("Well that seems to have failed. Message %r.", e)
        return 1
    finally:
        session.close()

    return 1 if summary.failed else 0

def setup_logging(verbose_console: bool = False):
    logger = logging.getLogger("dragdrop")
    logger.setLevel(logging.DEBUG)  # emit everything; handlers will filter

    # Clear existing handlers if this is called multiple times
    logger.handlers.clear()
    logger.propagate = False  # don't double-log via root

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(fmt)

    # --- Console: WARNING (or DEBUG if verbose_console=True) ---
    console_handler = logging.StreamHandler()
    console_level = logging.DEBUG if verbose_console else logging.WARNING
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)

    # --- File: DEBUG, truncated each run ---
    file_handler = logging.FileHandler(config.LOG_FILE, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    file_handler.name = "default_file"

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return logger

if __name__ == "__main__":
    sys.exit(main())
