"""Test switching the daemon logger between debug and normal verbosity."""

import logging

from dynamic_epp.debug import logger, set_debug

def test_set_debug():
    try:
        set_debug(True)
        assert logger.level == logging.DEBUG
        assert logger.isEnabledFor(logging.DEBUG)

        set_debug(False)
        assert logger.level == logging.INFO
        assert not logger.isEnabledFor(logging.DEBUG)
    finally:
        set_debug(False)
