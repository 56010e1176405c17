"""Optional Sentry integration for error tracking and performance spans.

Nothing is sent unless a DSN is configured by the host application.
"""

import os

import sentry_sdk

from sql_csv.__about__ import __version__

SENTRY_DSN_ENV = "SQL_CSV_SENTRY_DSN"


def setup_sentry(dsn: str | None = None, environment: str = "local") -> bool:
    """Initialize Sentry if a DSN is given or set in the environment.

    Returns True when Sentry was initialized.
    """
    dsn = dsn or os.environ.get(SENTRY_DSN_ENV)
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.03,
        environment=environment,
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True
