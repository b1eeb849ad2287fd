"""Diagnostic logging for the forwarder itself.

The forwarder is usually attached to the host application's root logger, so
its own warnings and errors go to a separate logger that writes to STDERR and
never propagates back into the logging tree.
"""

import logging
import os

logger = logging.getLogger("logger-client")
logger.setLevel(
    logging.DEBUG
    if os.getenv("LOGGER_CLIENT_DEBUG", "false").lower() == "true"
    else logging.INFO
)
logger.propagate = False

handler = logging.StreamHandler()
handler.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)
