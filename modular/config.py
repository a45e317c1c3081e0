"""Environment-driven settings.

``MODULAR_LOG``
    If set to anything other than the empty string or ``0``, diagnostics are
    written to ``stderr`` from import time on (see :py:func:`modular.logging`).
"""

import os


def log_from_environment() -> bool:
    setting = os.getenv('MODULAR_LOG', '')
    return setting.strip() not in ('', '0')
