"""Clipboard collaborator used by the copy action."""

from abc import ABC, abstractmethod
from typing import Optional


class ClipboardInterface(ABC):
    """Destination for copied document text."""

    @abstractmethod
    def write(self, text: str) -> bool:
        """Store text. Returns True on success."""
        pass


class MemoryClipboard(ClipboardInterface):
    """Holds the last copied text in process memory."""

    def __init__(self):
        self.content: Optional[str] = None

    def write(self, text: str) -> bool:
        self.content = text
        return True
