"""Clipboard operations mixin for TemplateModel.

This module provides copy/paste of a single template element through the
system clipboard.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from PySide6.QtCore import QByteArray, QMimeData, Signal, Slot
from PySide6.QtGui import QGuiApplication

from .constants import CLIPBOARD_FORMAT, CLIPBOARD_MIME_TYPE, DUPLICATE_OFFSET
from .errors import TemplateFormatError
from .logger import get_logger
from .store import element_from_dict, element_to_dict, get_element, insert_element, next_element_id
from .types import Template

if TYPE_CHECKING:
    from .controller import InteractionController

LOGGER = get_logger(__name__)


class ClipboardMixin:
    """Mixin providing clipboard operations."""

    # Signals (will be defined in TemplateModel)
    elementsChanged: Signal

    # Attributes expected from TemplateModel
    _controller: "InteractionController"
    _commit: Callable[[Template], None]
    selectElement: Callable[[str], None]

    def _write_clipboard_payload(self, payload: Dict[str, Any]) -> bool:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return False
        payload_text = json.dumps(payload, ensure_ascii=False)
        mime_data = QMimeData()
        mime_data.setData(CLIPBOARD_MIME_TYPE, QByteArray(payload_text.encode("utf-8")))
        mime_data.setText(payload_text)
        clipboard.setMimeData(mime_data)
        return True

    def _read_clipboard_payload(self) -> Optional[Dict[str, Any]]:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return None
        mime_data = clipboard.mimeData()
        if mime_data is None:
            return None
        payload_text: Optional[str] = None
        try:
            if mime_data.hasFormat(CLIPBOARD_MIME_TYPE):
                payload_text = bytes(mime_data.data(CLIPBOARD_MIME_TYPE)).decode("utf-8")
            elif mime_data.hasText():
                payload_text = mime_data.text()
            if not payload_text:
                return None
            payload = json.loads(payload_text)
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
        if not isinstance(payload, dict):
            return None
        if payload.get("format") != CLIPBOARD_FORMAT:
            return None
        return payload

    @Slot(str, result=bool)
    def copyElementToClipboard(self, element_id: str) -> bool:
        element = get_element(self._controller.template, element_id) if element_id else None
        if element is None:
            return False
        payload = {
            "format": CLIPBOARD_FORMAT,
            "version": 1,
            "element": element_to_dict(element),
        }
        return self._write_clipboard_payload(payload)

    @Slot(result=bool)
    def copySelectedToClipboard(self) -> bool:
        return self.copyElementToClipboard(self._controller.session.selected_element_id or "")

    @Slot(result=bool)
    def hasClipboardElement(self) -> bool:
        return self._read_clipboard_payload() is not None

    @Slot(result=str)
    def pasteFromClipboard(self) -> str:
        """Paste the clipboard element with a fresh id and select it.

        Returns the new element id, or an empty string when the clipboard
        holds no element.
        """
        payload = self._read_clipboard_payload()
        if payload is None:
            return ""
        try:
            element = element_from_dict(payload.get("element") or {})
        except TemplateFormatError as exc:
            LOGGER.warning("Ignoring clipboard element: %s", exc)
            return ""
        template = self._controller.template
        geometry = replace(
            element.geometry,
            x=element.geometry.x + DUPLICATE_OFFSET,
            y=element.geometry.y + DUPLICATE_OFFSET,
        )
        element = replace(element, id=next_element_id(template, element.kind), geometry=geometry)
        template, new_id = insert_element(template, element)
        self._commit(template)
        self.selectElement(new_id)
        return new_id

