from __future__ import annotations
from typing import Optional
from loguru import logger

class ErrorBanner:
    """
    The one dismissible error surface shared by the list and detail channels.
    """

    def __init__(self) -> None:
        self.message: Optional[str] = None

    def publish(self, message: str) -> None:
        logger.info(f"[Banner] {message}")
        self.message = message

    def dismiss(self) -> None:
        """Hide the message; loaded results and detail are left alone."""
        self.message = None
