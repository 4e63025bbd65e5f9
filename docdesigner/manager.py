"""Saving, loading and settings for document templates."""

from __future__ import annotations

import os
from typing import Dict, List

from PySide6.QtCore import Property, QObject, QSettings, QUrl, Signal, Slot

from .constants import DEFAULT_LOCALE, PDF_FILE_SUFFIX, SUPPORTED_LOCALES, TEMPLATE_FILE_SUFFIX
from .errors import TemplateFormatError
from .logger import get_logger
from .model import TemplateModel
from .printing import export_pdf
from .store import create_default, deserialize, serialize

LOGGER = get_logger(__name__)

SETTINGS_ORGANIZATION = "DriveFlow"
SETTINGS_APPLICATION = "DocumentDesigner"


class EditorSettings:
    """Typed access to the persisted editor preferences."""

    LOCALE_KEY = "locale"
    RECENT_KEY = "recentTemplates"

    def __init__(self, settings: QSettings | None = None):
        self._settings = settings if settings is not None else QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)

    @property
    def qsettings(self) -> QSettings:
        return self._settings

    @property
    def locale(self) -> str:
        value = self._settings.value(self.LOCALE_KEY, DEFAULT_LOCALE)
        if value not in SUPPORTED_LOCALES:
            return DEFAULT_LOCALE
        return str(value)

    @locale.setter
    def locale(self, value: str) -> None:
        self._settings.setValue(self.LOCALE_KEY, value)
        self._settings.sync()

    def recent_templates(self) -> List[str]:
        stored = self._settings.value(self.RECENT_KEY, [])
        # QSettings may return a string if only one item, or None
        if stored is None:
            return []
        if isinstance(stored, str):
            stored = [stored] if stored else []
        if isinstance(stored, list):
            return [str(path) for path in stored if path]
        return []

    def set_recent_templates(self, paths: List[str]) -> None:
        self._settings.setValue(self.RECENT_KEY, list(paths))
        self._settings.sync()


class TemplateManager(QObject):
    """Manager for saving and loading template files.

    Template files are UTF-8 JSON documents produced by
    :func:`docdesigner.store.serialize`, stored with a ``.doctpl`` suffix.
    """

    MAX_RECENT_TEMPLATES = 8

    saveCompleted = Signal(str)  # Emitted with file path after successful save
    loadCompleted = Signal(str)  # Emitted with file path after successful load
    exportCompleted = Signal(str)  # Emitted with PDF path after a print export
    errorOccurred = Signal(str)  # Emitted with error message on failure
    recentTemplatesChanged = Signal()
    currentFilePathChanged = Signal()

    def __init__(self, template_model: TemplateModel, settings: EditorSettings | None = None):
        super().__init__()
        self._template_model = template_model
        self._settings = settings if settings is not None else EditorSettings()
        self._current_file_path: str = ""
        self._recent_templates: List[str] = [
            path for path in self._settings.recent_templates() if os.path.exists(path)
        ][:self.MAX_RECENT_TEMPLATES]
        self._template_model.localeChanged.connect(self._store_locale)

    def _store_locale(self) -> None:
        self._settings.locale = self._template_model.session.locale

    def _normalize_file_path(self, file_path: str) -> str:
        """Convert file URLs into local paths, including Windows file URLs."""
        if file_path.startswith("file:"):
            url = QUrl(file_path)
            if url.isLocalFile():
                file_path = url.toLocalFile()
            else:
                file_path = url.path()
        if os.name == "nt" and file_path.startswith("/") and len(file_path) > 2 and file_path[2] == ":":
            file_path = file_path[1:]
        return file_path

    def _add_to_recent(self, file_path: str) -> None:
        if not file_path or not os.path.exists(file_path):
            return
        if file_path in self._recent_templates:
            self._recent_templates.remove(file_path)
        self._recent_templates.insert(0, file_path)
        self._recent_templates = self._recent_templates[:self.MAX_RECENT_TEMPLATES]
        self._settings.set_recent_templates(self._recent_templates)
        self.recentTemplatesChanged.emit()

    @Property("QVariantList", notify=recentTemplatesChanged)
    def recentTemplates(self) -> List[str]:
        return self._recent_templates

    @Slot(result=list)
    def getRecentTemplateNames(self) -> List[Dict[str, str]]:
        return [
            {"path": path, "name": os.path.splitext(os.path.basename(path))[0]}
            for path in self._recent_templates
        ]

    @Slot()
    def clearRecentTemplates(self) -> None:
        self._recent_templates = []
        self._settings.set_recent_templates([])
        self.recentTemplatesChanged.emit()

    @Property(str, notify=currentFilePathChanged)
    def currentFilePath(self) -> str:
        return self._current_file_path

    @Slot(result=bool)
    def hasCurrentFile(self) -> bool:
        return bool(self._current_file_path)

    @Slot(result=bool)
    def saveCurrentTemplate(self) -> bool:
        if not self._current_file_path:
            self.errorOccurred.emit("No file path specified")
            return False
        return self.saveTemplate(self._current_file_path)

    @Slot(str, result=bool)
    def saveTemplate(self, file_path: str) -> bool:
        """Write the current template to ``file_path`` (``.doctpl`` is appended)."""
        file_path = self._normalize_file_path(file_path)
        if not file_path:
            self.errorOccurred.emit("No file path specified")
            return False
        if not file_path.endswith(TEMPLATE_FILE_SUFFIX):
            file_path += TEMPLATE_FILE_SUFFIX

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(serialize(self._template_model.currentTemplate()))
        except OSError as e:
            error_msg = f"Failed to save template: {e}"
            LOGGER.error(error_msg)
            self.errorOccurred.emit(error_msg)
            return False

        self._current_file_path = file_path
        self.currentFilePathChanged.emit()
        self._add_to_recent(file_path)
        self.saveCompleted.emit(file_path)
        LOGGER.info("Template saved to: %s", file_path)
        return True

    @Slot(str, result=bool)
    def exportPdf(self, file_path: str) -> bool:
        """Print the rendered document to a PDF file.

        An empty path prints next to the current template file. A ``.doctpl``
        suffix is swapped for ``.pdf``.
        """
        file_path = self._normalize_file_path(file_path) or self._current_file_path
        if not file_path:
            self.errorOccurred.emit("No file path specified")
            return False
        if file_path.endswith(TEMPLATE_FILE_SUFFIX):
            file_path = file_path[: -len(TEMPLATE_FILE_SUFFIX)]
        if not file_path.endswith(PDF_FILE_SUFFIX):
            file_path += PDF_FILE_SUFFIX

        document = self._template_model.renderDocument()
        if not export_pdf(document, file_path, self._template_model.currentTemplate().name):
            error_msg = f"Failed to print document: {file_path}"
            self.errorOccurred.emit(error_msg)
            return False

        self.exportCompleted.emit(file_path)
        return True

    @Slot(str, result=bool)
    def loadTemplate(self, file_path: str) -> bool:
        """Load a template file into the model.

        A missing or corrupt file never leaves the editor without a template:
        the built-in template for the current category is loaded instead and
        ``errorOccurred`` is emitted.
        """
        file_path = self._normalize_file_path(file_path)
        if not file_path:
            self.errorOccurred.emit("No file path specified")
            return False

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                template = deserialize(f.read())
        except FileNotFoundError:
            self._fall_back(f"File not found: {file_path}")
            return False
        except (OSError, UnicodeDecodeError) as e:
            self._fall_back(f"Failed to load template: {e}")
            return False
        except TemplateFormatError as e:
            self._fall_back(f"Invalid template file: {e}")
            return False

        self._template_model.setTemplate(template)
        self._current_file_path = file_path
        self.currentFilePathChanged.emit()
        self._add_to_recent(file_path)
        self.loadCompleted.emit(file_path)
        LOGGER.info("Template loaded from: %s", file_path)
        return True

    def _fall_back(self, error_msg: str) -> None:
        LOGGER.error(error_msg)
        session = self._template_model.session
        self._template_model.setTemplate(create_default(session.template.category, session.locale))
        self._current_file_path = ""
        self.currentFilePathChanged.emit()
        self.errorOccurred.emit(error_msg)
