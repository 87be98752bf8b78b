from .common import (
    ProgressPrinter,
    exit_with_message,
)

from .handlers import (
    handle_download_deck,
    handle_plan_deck,
)

__all__ = [
    "ProgressPrinter",
    "exit_with_message",
    "handle_download_deck",
    "handle_plan_deck",
]
