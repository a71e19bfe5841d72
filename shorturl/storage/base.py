"""
Base storage interface for the Short URL service.

Purpose:
    Define a small, stable contract for the entry store so the manager and
    routes never depend on where entries live. The in-memory backend is the
    only one shipped; a persistent one would implement the same methods.

Testing & Coverage:
    Abstract methods are not executed directly in tests and carry
    `# pragma: no cover`.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from ..models import Click, UrlEntry


class BaseStorage(ABC):
    """Abstract base class for entry stores."""

    @abstractmethod  # pragma: no cover
    def create(self, code: str, entry: UrlEntry) -> None:
        """
        Insert a new entry under ``code``.

        Raises:
            Conflict: If ``code`` is already present. The presence check and the
                insert must behave as one step.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get(self, code: str) -> UrlEntry:
        """
        Return the entry stored under ``code``.

        Raises:
            NotFound: If ``code`` is absent.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def list_all(self) -> List[Tuple[str, UrlEntry]]:
        """Return every (code, entry) pair. Order is not part of the contract."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def append_click(self, code: str, click: Click) -> None:
        """
        Append ``click`` to the entry's click list.

        Raises:
            NotFound: If ``code`` is absent.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def __contains__(self, code: object) -> bool:
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def __len__(self) -> int:
        raise NotImplementedError
