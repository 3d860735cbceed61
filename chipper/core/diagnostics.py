# chipper/core/diagnostics.py
from __future__ import annotations

import logging
from typing import Optional

log = logging.getLogger("chipper.assert")


class ChipperError(Exception):
    pass


class StringsLocationError(ChipperError):
    """Raised when a caller escalates a soft failure from the locale scan."""


def soft_assert(condition: bool, message: str) -> Optional[str]:
    """Report a failed assertion without halting.

    Returns the message when the condition is false so the caller can carry it
    next to its best-effort result, otherwise None.
    """
    if condition:
        return None
    log.warning({"event": "assertion_failed", "message": message})
    return message
