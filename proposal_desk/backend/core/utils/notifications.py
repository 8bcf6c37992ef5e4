"""Operator-facing notifications (the frontend's toasts)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toast:
    level: str  # "success" | "error" | "info"
    message: str


@dataclass
class Toaster:
    """Collect toasts raised by a view model, newest last."""

    toasts: list[Toast] = field(default_factory=list)

    def success(self, message: str) -> None:
        logger.info(message)
        self.toasts.append(Toast("success", message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self.toasts.append(Toast("error", message))

    def info(self, message: str) -> None:
        logger.info(message)
        self.toasts.append(Toast("info", message))

    @property
    def last(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None

    def messages(self, level: str | None = None) -> list[str]:
        return [t.message for t in self.toasts if level is None or t.level == level]

    def clear(self) -> None:
        self.toasts.clear()
