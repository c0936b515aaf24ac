import logging
import sys

from reimbursements.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Return a stdout logger tagged with ``[NAME]``.

    Handlers are attached once per logger name so repeated imports don't
    duplicate output.
    """
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(f"[{name.upper()}] %(message)s"))
        log.addHandler(h)
    return log
