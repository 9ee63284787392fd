import logging
import sys
import os

logger = logging.getLogger("dynamic_epp")
logger.setLevel(logging.INFO)

if os.path.exists("/dev/log"):
    from logging.handlers import SysLogHandler
    handler = SysLogHandler(address="/dev/log")
else:
    handler = logging.StreamHandler(sys.stdout)

formatter = logging.Formatter('%(name)s: %(levelname)s: %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)

def set_debug(enabled):
    """Switch the daemon logger between DEBUG and INFO, from '--debug' or 'general.debug'."""
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)

def debug_log(module, message):
    logger.debug(f"[{module}] {message}")

def info_log(module, message):
    logger.info(f"[{module}] {message}")

def warning_log(module, message):
    logger.warning(f"[{module}] {message}")

def error_log(module, message):
    logger.error(f"[{module}] {message}")
