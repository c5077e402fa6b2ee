"""
Registry of loaded localization managers, one per application id.

The host application owns a ManagerRegistry instead of relying on a
process-wide global. The registry lock guards only the id -> manager map;
each manager serializes its own lookups.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from ..utils.core.exceptions import ManagerDisposedError, ManagerNotFoundError
from .manager import LocalizationManager, ResolvedString

logger = logging.getLogger(__name__)


class ManagerRegistry:
    """Owns the lifetimes of LocalizationManager instances."""

    def __init__(self) -> None:
        self._managers: dict[str, LocalizationManager] = {}
        self._disposed_ids: set[str] = set()
        self._lock: threading.Lock = threading.Lock()

    def register(self, manager: LocalizationManager) -> None:
        """
        Register ``manager`` under its app id, disposing any manager it replaces.

        Raises:
            ManagerDisposedError: If the manager has already been disposed
        """
        if manager.is_disposed:
            raise ManagerDisposedError(
                f"Cannot register disposed manager {manager.app_id!r}",
                app_id=manager.app_id,
            )

        with self._lock:
            previous = self._managers.get(manager.app_id)
            self._managers[manager.app_id] = manager
            self._disposed_ids.discard(manager.app_id)

        manager.add_dispose_callback(self._on_manager_disposed)
        if previous is not None and previous is not manager:
            logger.info(f"Replacing localization manager for {manager.app_id}")
            previous.dispose()

    def _on_manager_disposed(self, manager: LocalizationManager) -> None:
        with self._lock:
            if self._managers.get(manager.app_id) is manager:
                del self._managers[manager.app_id]
                self._disposed_ids.add(manager.app_id)

    def get(self, app_id: str) -> LocalizationManager:
        """
        Get the live manager for ``app_id``.

        Raises:
            ManagerDisposedError: If the manager was disposed, or no managers
                are loaded at all
            ManagerNotFoundError: If no manager was registered for ``app_id``
                while others are loaded
        """
        with self._lock:
            manager = self._managers.get(app_id)
            if manager is None:
                if app_id in self._disposed_ids or not self._managers:
                    raise ManagerDisposedError(
                        f"Localization manager {app_id!r} has been disposed "
                        f"({len(self._managers)} managers loaded)",
                        app_id=app_id,
                    )
                raise ManagerNotFoundError(
                    f"No localization manager loaded for {app_id!r}",
                    app_id=app_id,
                )
        if manager.is_disposed:
            raise ManagerDisposedError(
                f"Localization manager {app_id!r} has been disposed", app_id=app_id
            )
        return manager

    def dispose(self, app_id: str) -> None:
        """Dispose and unregister the manager for ``app_id``, if loaded."""
        with self._lock:
            manager = self._managers.get(app_id)
        if manager is not None:
            manager.dispose()

    def dispose_all(self) -> None:
        with self._lock:
            managers = list(self._managers.values())
        for manager in managers:
            manager.dispose()

    def clear(self) -> None:
        """Forget every manager without disposing it."""
        with self._lock:
            self._managers.clear()
            self._disposed_ids.clear()

    @property
    def app_ids(self) -> list[str]:
        with self._lock:
            return list(self._managers)

    def __contains__(self, app_id: object) -> bool:
        with self._lock:
            return app_id in self._managers

    def __len__(self) -> int:
        with self._lock:
            return len(self._managers)

    def resolve(
        self,
        app_id: str,
        unit_id: str,
        preferred_languages: Sequence[str],
        fallback_text: str | None,
        comment: str | None = None,
    ) -> ResolvedString:
        return self.get(app_id).resolve(
            unit_id, preferred_languages, fallback_text, comment
        )

    def get_dynamic_string(
        self,
        app_id: str,
        unit_id: str,
        fallback_text: str | None,
        comment: str | None = None,
        language: str | None = None,
    ) -> str | None:
        return self.get(app_id).get_dynamic_string(
            unit_id, fallback_text, comment, language
        )
