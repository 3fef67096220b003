import logging
import sys

_PACKAGE_PREFIX = "fantasy_tier_board."
_HTTP_LOGGERS = ("httpx", "httpcore")


class _BoardFormatter(logging.Formatter):
    """``LEVEL  module: message`` with the package prefix stripped from logger names."""

    def __init__(self) -> None:
        super().__init__("%(levelname)-7s %(short_name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        record.short_name = record.name.removeprefix(_PACKAGE_PREFIX)
        return super().format(record)


def configure_logging(*, verbose: bool = False) -> None:
    """Send log records to stderr so they never mix with command output on stdout.

    Verbose mode shows DEBUG records, including request logging from httpx.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_BoardFormatter())
    root.addHandler(handler)

    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
