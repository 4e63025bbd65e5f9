"""UI creation functions for the document designer."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from PySide6.QtQml import QQmlApplicationEngine

from .logger import get_logger
from .manager import EditorSettings, TemplateManager
from .model import TemplateModel
from .qml import DESIGNER_QML
from .store import create_default, parse_category

LOGGER = get_logger(__name__)


def create_designer_window(
    template_model: TemplateModel,
    template_manager: Optional[TemplateManager] = None,
) -> QQmlApplicationEngine:
    """Create and return a QQmlApplicationEngine hosting the designer UI."""
    if template_manager is None:
        template_manager = TemplateManager(template_model)
    engine = QQmlApplicationEngine()
    engine.rootContext().setContextProperty("templateModel", template_model)
    engine.rootContext().setContextProperty("templateManager", template_manager)
    engine._template_manager = template_manager
    engine.loadData(DESIGNER_QML.encode("utf-8"))
    return engine


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="docdesigner", description="Design printable rental documents.")
    parser.add_argument("file", nargs="?", help="template file (.doctpl) to open")
    parser.add_argument("--category", default="quote", help="document category for a new design")
    parser.add_argument("--locale", default=None, help="fr or ar; defaults to the saved preference")
    parser.add_argument("--smoke", action="store_true", help="load the UI and exit")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the document designer."""
    from PySide6.QtGui import QGuiApplication

    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if args.verbose:
        logging.getLogger("docdesigner").setLevel(logging.DEBUG)
    smoke_mode = args.smoke or os.environ.get("DOCDESIGNER_SMOKE") == "1"

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv)

    settings = EditorSettings()
    locale = args.locale or settings.locale
    try:
        category = parse_category(args.category)
    except ValueError as e:
        LOGGER.error("%s", e)
        return 2

    template_model = TemplateModel(create_default(category, locale), locale=locale)
    template_manager = TemplateManager(template_model, settings)

    engine = create_designer_window(template_model, template_manager)
    if not engine.rootObjects():
        return 1

    if args.file:
        template_manager.loadTemplate(args.file)

    if smoke_mode:
        return 0

    return app.exec()
