"""Logging configuration for command line runs."""

import logging

from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Send log records to a rich handler on the root logger.

    Action records carry ``issue`` and ``action`` extras for handlers that
    want structured output.
    """
    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # PyGitHub logs every request at DEBUG
    logging.getLogger("github").setLevel(logging.INFO)
