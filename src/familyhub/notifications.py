"""Toast notifications raised by controllers and shown by the pages."""

from dataclasses import dataclass
from enum import Enum


class ToastKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    kind: ToastKind
    message: str


class Notifier:
    """Collects toasts until the page (or CLI) drains them."""

    def __init__(self):
        self.toasts: list[Toast] = []

    def success(self, message: str) -> None:
        self.toasts.append(Toast(ToastKind.SUCCESS, message))

    def error(self, message: str) -> None:
        self.toasts.append(Toast(ToastKind.ERROR, message))

    def info(self, message: str) -> None:
        self.toasts.append(Toast(ToastKind.INFO, message))

    @property
    def last(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None

    def drain(self) -> list[Toast]:
        """Return and forget all pending toasts."""
        toasts, self.toasts = self.toasts, []
        return toasts
