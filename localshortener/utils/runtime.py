"""Detect whether the handlers run on a developer machine

`guarantee_500_response` re-raises unexpected errors locally so tracebacks
reach the terminal, and masks them as HTTP 500 everywhere else.
"""

import os

from localshortener.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV


LOCAL_APP_ENV = 'local'


def running_locally() -> bool:
    """True when APP_ENV is 'local' or the SAM CLI sets AWS_SAM_LOCAL=true"""
    if os.getenv(AWS_SAM_LOCAL_ENV) == 'true':
        return True
    return os.getenv(APP_ENV_ENV, '').strip().lower() == LOCAL_APP_ENV
