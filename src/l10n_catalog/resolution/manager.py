"""
Localization manager: thread-safe string resolution for one application.

A manager wraps the LocalizedStringCache of one application id and serializes
every read and write through a single re-entrant lock. Once disposed, every
operation raises ManagerDisposedError.

Usage Examples:
    >>> manager = LocalizationManager("myapp", "My App", "1.2.0", documents)
    >>> manager.resolve("Main.Title", ["fr", "en"], "Welcome")
    ResolvedString(text='Bienvenue', language='fr')
    >>> manager.get_dynamic_string("Menu.Open", "Open", language="fr")
    'Ouvrir'
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import TracebackType
from typing import NamedTuple, Self

from ..catalog.model import DEFAULT_LANGUAGE, Document
from ..utils.core.exceptions import ManagerDisposedError
from .string_cache import LocalizedStringCache

logger = logging.getLogger(__name__)


class ResolvedString(NamedTuple):
    """Text chosen for an id and the language it came from."""

    text: str | None
    language: str


class LocalizationManager:
    """
    Resolves strings for one application across its loaded languages.

    Resolution order for ``resolve(id, preferred_languages, fallback_text)``:

    1. If the first preferred language is the default language, the caller's
       fallback text wins (stored default text is used only when no fallback
       text is given).
    2. Otherwise preferred languages are tried in order; the first one with a
       non-empty translation wins. Reaching the default language in the list
       stops the search.
    3. A translation recorded under a renamed id (orphan) is tried for the
       first non-default preferred language.
    4. The fallback text (or the stored default text) is returned, attributed
       to the default language.
    """

    def __init__(
        self,
        app_id: str,
        app_name: str,
        app_version: str,
        documents: Mapping[str, Document] | Iterable[Document] = (),
        default_language: str = DEFAULT_LANGUAGE,
        ui_language: str | None = None,
    ) -> None:
        if not app_id:
            raise ValueError("app_id must not be empty")
        self.app_id: str = app_id
        self.app_name: str = app_name
        self.app_version: str = app_version
        self.default_language: str = default_language
        self._ui_language: str = ui_language or default_language
        self._cache: LocalizedStringCache = LocalizedStringCache(
            documents, default_language
        )
        self._lock: threading.RLock = threading.RLock()
        self._disposed: bool = False
        self._dispose_callbacks: list[Callable[[LocalizationManager], None]] = []

        logger.info(
            f"Loaded localization manager {app_id} ({app_name} {app_version}) "
            f"with languages: {', '.join(self._cache.languages)}"
        )

    # Lifecycle

    @property
    def is_disposed(self) -> bool:
        with self._lock:
            return self._disposed

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise ManagerDisposedError(
                f"Localization manager {self.app_id!r} has been disposed",
                app_id=self.app_id,
            )

    def add_dispose_callback(
        self, callback: Callable[[LocalizationManager], None]
    ) -> None:
        with self._lock:
            if callback not in self._dispose_callbacks:
                self._dispose_callbacks.append(callback)

    def dispose(self) -> None:
        """Release the manager; later calls on it raise ManagerDisposedError."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            callbacks = list(self._dispose_callbacks)
            self._dispose_callbacks.clear()

        for callback in callbacks:
            callback(self)
        logger.info(f"Disposed localization manager {self.app_id}")

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()

    # Languages

    @property
    def ui_language(self) -> str:
        with self._lock:
            return self._ui_language

    def set_ui_language(self, language: str) -> None:
        with self._lock:
            self._ensure_not_disposed()
            self._ui_language = language
        logger.debug(f"{self.app_id}: UI language set to {language}")

    def available_languages(self) -> list[str]:
        """Language tags with a loaded document, default language first."""
        with self._lock:
            self._ensure_not_disposed()
            return self._cache.languages

    # Resolution

    def resolve(
        self,
        unit_id: str,
        preferred_languages: Sequence[str],
        fallback_text: str | None,
        comment: str | None = None,  # pyright: ignore[reportUnusedParameter]
    ) -> ResolvedString:
        """
        Choose the text to display for ``unit_id``.

        Args:
            unit_id: Catalog id of the string
            preferred_languages: Acceptable languages, most preferred first;
                empty means the UI language
            fallback_text: Default-language text supplied by the caller, or
                None to use whatever default text is stored
            comment: Description for translators (informational)

        Returns:
            ResolvedString with the text and the language it came from

        Raises:
            ManagerDisposedError: If the manager has been disposed
        """
        with self._lock:
            self._ensure_not_disposed()
            languages = list(preferred_languages) or [self._ui_language]
            default = self.default_language

            if languages[0] == default:
                return ResolvedString(self._default_text(unit_id, fallback_text), default)

            for language in languages:
                if language == default:
                    break
                translation = self._cache.get_translation(language, unit_id)
                if translation is not None:
                    return ResolvedString(translation, language)

            remap_language = next(
                (language for language in languages if language != default), None
            )
            if remap_language is not None:
                remapped = self._cache.find_remapped_translation(
                    remap_language, unit_id, fallback_text
                )
                if remapped is not None:
                    return ResolvedString(remapped, remap_language)

            return ResolvedString(self._default_text(unit_id, fallback_text), default)

    def _default_text(self, unit_id: str, fallback_text: str | None) -> str | None:
        if fallback_text is not None:
            return fallback_text
        return self._cache.get_default_text(unit_id)

    def get_string(
        self, unit_id: str, fallback_text: str | None, comment: str | None = None
    ) -> str | None:
        """Resolve ``unit_id`` in the UI language and return only the text."""
        with self._lock:
            return self.resolve(unit_id, [self._ui_language], fallback_text, comment).text

    def get_string_or_default(
        self,
        unit_id: str,
        fallback_text: str | None,
        comment: str | None,
        language: str,
    ) -> str | None:
        """Resolve ``unit_id`` in one specific language, else the default text."""
        return self.resolve(unit_id, [language], fallback_text, comment).text

    def record_dynamic(
        self,
        unit_id: str,
        fallback_text: str,
        comment: str | None = None,
        language: str | None = None,
    ) -> bool:
        """
        Record an id found only at runtime so translators can see it.

        Args:
            unit_id: Catalog id of the string
            fallback_text: Default-language text from the calling code
            comment: Optional note for translators
            language: Language of ``fallback_text``; defaults to the
                default language, the only one that holds dynamic ids

        Returns:
            True if the default-language document changed

        Raises:
            ValueError: If ``language`` is not the default language
        """
        if language is not None and language != self.default_language:
            raise ValueError(
                f"Dynamic ids are recorded in {self.default_language}, not {language}"
            )
        with self._lock:
            self._ensure_not_disposed()
            return self._cache.record_dynamic(unit_id, fallback_text, comment)

    def get_dynamic_string(
        self,
        unit_id: str,
        fallback_text: str | None,
        comment: str | None = None,
        language: str | None = None,
    ) -> str | None:
        """
        Record ``unit_id`` as dynamic (when text is given) and resolve it.

        Args:
            unit_id: Catalog id of the string
            fallback_text: Default-language text from the calling code
            comment: Description for translators, stored on new units
            language: Language to resolve in; defaults to the UI language
        """
        with self._lock:
            self._ensure_not_disposed()
            if fallback_text is not None:
                _ = self._cache.record_dynamic(unit_id, fallback_text, comment)
            target = language or self._ui_language
            return self.resolve(unit_id, [target], fallback_text, comment).text

    def update_localized_text(self, unit_id: str, text: str, language: str) -> bool:
        """Store a translator-supplied text for ``unit_id`` in ``language``."""
        with self._lock:
            self._ensure_not_disposed()
            return self._cache.update_text(unit_id, text, language)

    def get_value_for_exact_language(self, language: str, unit_id: str) -> str | None:
        """Stored value for one language without fallback or newline decoding."""
        with self._lock:
            self._ensure_not_disposed()
            return self._cache.get_value_for_exact_language(language, unit_id)

    # Documents

    def get_document(self, language: str) -> Document | None:
        with self._lock:
            self._ensure_not_disposed()
            return self._cache.document(language)

    def replace_document(self, document: Document) -> None:
        """Swap in a new document for its language (e.g. after regeneration)."""
        with self._lock:
            self._ensure_not_disposed()
            self._cache.set_document(document)
        logger.info(f"{self.app_id}: replaced {document.language} catalog")

    def modified_snapshots(self) -> list[tuple[Document, int]]:
        """
        Copies of the documents changed and not yet saved, with their revision.

        Pass the revision back to ``mark_saved`` once the copy is persisted;
        changes made after the copy was taken keep the language pending.
        """
        with self._lock:
            self._ensure_not_disposed()
            snapshots: list[tuple[Document, int]] = []
            for language in self._cache.modified_languages:
                document = self._cache.document(language)
                if document is not None:
                    snapshots.append((document.copy(), self._cache.revision(language)))
            return snapshots

    def modified_documents(self) -> list[Document]:
        """Copies of the documents changed through this manager and not yet saved."""
        return [document for document, _ in self.modified_snapshots()]

    def mark_saved(self, language: str, revision: int | None = None) -> bool:
        """
        Clear the unsaved flag of ``language``.

        Returns:
            False if the document changed after ``revision`` and is still pending
        """
        with self._lock:
            saved = self._cache.mark_saved(language, revision)
        if not saved:
            logger.debug(f"{self.app_id}: {language} catalog changed during save")
        return saved
