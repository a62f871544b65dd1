"""Debug output for csgkernel.

Modules log through ``logging.getLogger(__name__)`` and the package
never installs handlers by itself.  :func:`setup_logging` attaches
output to the ``csgkernel`` logger, e.g. to watch the polygon counts of
boolean operations::

    import logging
    from csgkernel.logconfig import setup_logging
    setup_logging(logging.DEBUG)
"""

import logging
import sys
from typing import List, Optional

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

# handlers added by setup_logging, replaced on the next call
_installed: List[logging.Handler] = []


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  stream=None) -> logging.Logger:
    """Send csgkernel log records at ``level`` and above to ``stream``
    (stdout by default) and, if given, to ``log_file``.

    Calling it again replaces the handlers of the previous call; handlers
    added by the application are left alone.
    """
    logger = logging.getLogger('csgkernel')
    logger.setLevel(level)
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed.append(handler)
    return logger
