"""
supplier_portal/notifications.py

Transient user notifications emitted by the stores (the "toast" side channel).

Stores only see the Notifier protocol. The web layer plugs in Flask flash
messages (supplier_portal.services.FlashNotifier); everything else defaults to
LogNotifier.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Write notifications to the application log."""

    def success(self, message: str) -> None:
        logger.info("%s", message)

    def error(self, message: str) -> None:
        logger.warning("%s", message)
