import logging
import os

NOISY_LOGGERS = ("urllib3", "requests", "watchdog")


def configure_logging(default_level="INFO"):
    level_name = (os.getenv("DASHBOARD_LOG_LEVEL") or default_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logging.getLogger("dashboard")
