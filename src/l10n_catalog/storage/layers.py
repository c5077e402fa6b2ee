"""
Layered catalog storage for one application.

Three directories hold catalog files named from a template such as
``{app_id}.{language}.po``:

- installed: read-only reference shipped with the application
- generated: writable cache maintained by the version reconciler
- user-modified: translator overrides, never rewritten by reconciliation

Loading a language prefers user-modified over generated over installed.
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path

from ..catalog.codec import DocumentCodec, PoCatalogCodec
from ..catalog.merger import ProgressCallback
from ..catalog.model import DEFAULT_LANGUAGE, Document
from ..catalog.reconciler import ReconcileResult, ScanFunction, reconcile_default_document
from ..resolution.manager import LocalizationManager
from ..utils.core.exceptions import CatalogParseError, CatalogValidationError

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME_TEMPLATE = "{app_id}.{language}.po"


class CatalogStore:
    """Reads and writes an application's catalogs across storage tiers."""

    def __init__(
        self,
        app_id: str,
        installed_dir: Path,
        generated_dir: Path,
        user_modified_dir: Path | None = None,
        file_name_template: str = DEFAULT_FILE_NAME_TEMPLATE,
        default_language: str = DEFAULT_LANGUAGE,
        codec: DocumentCodec | None = None,
    ) -> None:
        if "{language}" not in file_name_template or "{app_id}" not in file_name_template:
            raise ValueError(
                "file_name_template must contain {app_id} and {language} placeholders"
            )
        self.app_id: str = app_id
        self.installed_dir: Path = installed_dir
        self.generated_dir: Path = generated_dir
        self.user_modified_dir: Path | None = user_modified_dir
        self.file_name_template: str = file_name_template
        self.default_language: str = default_language
        self.codec: DocumentCodec = codec or PoCatalogCodec()

        prefix, _, suffix = file_name_template.replace("{app_id}", app_id).partition(
            "{language}"
        )
        self._file_pattern: re.Pattern[str] = re.compile(
            f"^{re.escape(prefix)}(?P<language>[A-Za-z0-9_-]+){re.escape(suffix)}$"
        )

        logger.debug(
            f"CatalogStore for {app_id}: installed={installed_dir}, "
            f"generated={generated_dir}, user_modified={user_modified_dir}"
        )

    # Paths

    def file_name(self, language: str) -> str:
        return self.file_name_template.format(app_id=self.app_id, language=language)

    def installed_path(self, language: str) -> Path:
        return self.installed_dir / self.file_name(language)

    def generated_path(self, language: str) -> Path:
        return self.generated_dir / self.file_name(language)

    def user_modified_path(self, language: str) -> Path | None:
        if self.user_modified_dir is None:
            return None
        return self.user_modified_dir / self.file_name(language)

    def _tiers(self) -> list[Path]:
        """Directories from highest to lowest priority."""
        tiers = [self.generated_dir, self.installed_dir]
        if self.user_modified_dir is not None:
            tiers.insert(0, self.user_modified_dir)
        return tiers

    def language_from_file_name(self, file_name: str) -> str | None:
        match = self._file_pattern.match(file_name)
        return match.group("language") if match else None

    def available_languages(self) -> list[str]:
        """Language tags with a catalog file in any tier, default first."""
        languages: set[str] = set()
        for directory in self._tiers():
            if not directory.is_dir():
                continue
            for path in directory.iterdir():
                if not path.is_file():
                    continue
                language = self.language_from_file_name(path.name)
                if language:
                    languages.add(language)

        others = sorted(languages - {self.default_language})
        if self.default_language in languages:
            return [self.default_language, *others]
        return others

    # Reading

    def read_document(self, path: Path) -> Document | None:
        """
        Read one catalog file.

        Returns:
            The document, or None if the file is missing, empty or unreadable
        """
        if not path.exists():
            return None
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning(f"Cannot read catalog {path}: {e}")
            return None
        if not data.strip():
            logger.warning(f"Catalog file is empty: {path}")
            return None
        try:
            return self.codec.parse(data)
        except (CatalogParseError, CatalogValidationError) as e:
            logger.warning(f"Ignoring unparsable catalog {path}: {e}")
            return None

    def load(self, language: str) -> Document | None:
        """Load the highest-priority readable catalog for ``language``."""
        for directory in self._tiers():
            path = directory / self.file_name(language)
            document = self.read_document(path)
            if document is not None:
                logger.debug(f"Loaded {language} catalog from {path}")
                return document
        return None

    # Writing

    def save(self, document: Document, user_modified: bool = False) -> Path:
        """
        Atomically write ``document`` to the generated (or user-modified) tier.

        Raises:
            ValueError: If the user-modified tier is requested but not configured
            OSError: If file operations fail
        """
        if user_modified:
            if self.user_modified_dir is None:
                raise ValueError("No user-modified directory configured")
            directory = self.user_modified_dir
        else:
            directory = self.generated_dir

        path = directory / self.file_name(document.language)
        _ = path.parent.mkdir(parents=True, exist_ok=True)
        content = self.codec.serialize(document)

        # Atomic save using temporary file
        temp_file = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                _ = temp_file.write(content)
                temp_file.flush()
                temp_path = Path(temp_file.name)

            # Atomic move
            _ = temp_path.replace(path)
        except Exception as e:
            # Clean up temporary file if it exists
            if temp_file and Path(temp_file.name).exists():
                Path(temp_file.name).unlink(missing_ok=True)
            raise OSError(f"Failed to save catalog to {path}: {e}") from e

        logger.info(f"Saved {document.language} catalog to {path}")
        return path

    # Reconciliation and manager wiring

    def reconcile_default(
        self,
        current_version: str,
        scan: ScanFunction | None = None,
        report_progress: ProgressCallback | None = None,
    ) -> ReconcileResult:
        """
        Bring the generated default-language catalog up to ``current_version``.

        The result is written to the generated tier whenever it changed.
        """
        installed = self.read_document(self.installed_path(self.default_language))
        generated = self.read_document(self.generated_path(self.default_language))

        result = reconcile_default_document(
            installed, generated, current_version, scan, report_progress
        )
        if result.changed:
            _ = self.save(result.document)
        logger.info(
            f"Default catalog for {self.app_id} reconciled: {result.action.value}"
        )
        return result

    def load_manager(
        self,
        app_name: str,
        current_version: str,
        scan: ScanFunction | None = None,
        ui_language: str | None = None,
    ) -> LocalizationManager:
        """Reconcile the default catalog, load every language and build a manager."""
        default_document = self.reconcile_default(current_version, scan).document
        user_override = None
        user_path = self.user_modified_path(self.default_language)
        if user_path is not None:
            user_override = self.read_document(user_path)

        documents: list[Document] = [user_override or default_document]
        for language in self.available_languages():
            if language == self.default_language:
                continue
            document = self.load(language)
            if document is not None:
                documents.append(document)

        return LocalizationManager(
            self.app_id,
            app_name,
            current_version,
            documents,
            default_language=self.default_language,
            ui_language=ui_language,
        )

    def save_manager(self, manager: LocalizationManager) -> list[Path]:
        """
        Persist every document the manager changed since it was loaded.

        Each document is written from a copy taken under the manager's lock.
        A language changed while its copy was being written stays pending
        for the next call.
        """
        saved: list[Path] = []
        for document, revision in manager.modified_snapshots():
            saved.append(self.save(document))
            _ = manager.mark_saved(document.language, revision)
        return saved
