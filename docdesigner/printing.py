"""Paint rendered documents with QPainter for printing and export.

The painter walks the :class:`~docdesigner.renderer.RenderedDocument`
produced by :func:`~docdesigner.renderer.render`, the same output the editor
canvas and the preview show, onto a page of the template's canvas size.
"""

from __future__ import annotations

from typing import Callable, Dict

from PySide6.QtCore import QByteArray, QMarginsF, QPointF, QRect, QRectF, QSizeF, Qt
from PySide6.QtGui import (
    QColor,
    QFont,
    QImage,
    QPageSize,
    QPainter,
    QPdfWriter,
    QPen,
    QTextOption,
)

from .logger import get_logger
from .registry import (
    ChecklistPayload,
    DividerPayload,
    FuelMileagePayload,
    LogoPayload,
    QrPayload,
    SignaturePayload,
    TablePayload,
    TextPayload,
)
from .renderer import DrawInstruction, RenderedDocument
from .types import ElementKind, ElementStyle

LOGGER = get_logger(__name__)

PDF_RESOLUTION = 72
MUTED_COLOR = "#9ca3af"
CHECKED_COLOR = "#16a34a"

_ALIGNMENTS = {
    "left": Qt.AlignmentFlag.AlignLeft,
    "center": Qt.AlignmentFlag.AlignHCenter,
    "right": Qt.AlignmentFlag.AlignRight,
}


def _color(value: str, fallback: str = "#111827") -> QColor:
    color = QColor(value)
    return color if color.isValid() else QColor(fallback)


def _font(style: ElementStyle, size: float = 0.0, bold: bool = False) -> QFont:
    font = QFont(style.font_family)
    font.setPixelSize(max(1, int(round(size or style.font_size))))
    weight = 700 if bold else _weight(style.font_weight)
    font.setWeight(QFont.Weight(weight))
    if style.letter_spacing:
        font.setLetterSpacing(QFont.SpacingType.AbsoluteSpacing, style.letter_spacing)
    return font


def _weight(value: str) -> int:
    if value == "bold":
        return 700
    try:
        weight = int(float(value))
    except ValueError:
        return 400
    return min(900, max(100, int(round(weight / 100.0)) * 100))


def _text_option(style: ElementStyle) -> QTextOption:
    option = QTextOption(_ALIGNMENTS.get(style.text_align, Qt.AlignmentFlag.AlignLeft))
    option.setWrapMode(QTextOption.WrapMode.WordWrap)
    return option


def _load_image(source: str) -> QImage:
    if source.startswith("data:") and "," in source:
        encoded = source.split(",", 1)[1]
        return QImage.fromData(QByteArray.fromBase64(QByteArray(encoded.encode("ascii", "ignore"))))
    return QImage(source)


def _content_rect(instruction: DrawInstruction) -> QRectF:
    padding = instruction.style.padding
    return QRectF(
        instruction.x + padding,
        instruction.y + padding,
        max(0.0, instruction.width - 2 * padding),
        max(0.0, instruction.height - 2 * padding),
    )


# --- Per-kind painters ---------------------------------------------------------


def _paint_text(painter: QPainter, instruction: DrawInstruction, payload: TextPayload) -> None:
    style = instruction.style
    painter.setFont(_font(style))
    painter.setPen(_color(style.color))
    painter.drawText(_content_rect(instruction), payload.text, _text_option(style))


def _paint_logo(painter: QPainter, instruction: DrawInstruction, payload: LogoPayload) -> None:
    target = _content_rect(instruction)
    image = QImage() if payload.is_placeholder else _load_image(payload.image)
    if image.isNull() or target.isEmpty():
        painter.setPen(QPen(QColor(MUTED_COLOR), 1))
        painter.setBrush(QColor("#f9fafb"))
        painter.drawRect(target)
        painter.setFont(_font(instruction.style, bold=True))
        painter.drawText(target, payload.label, QTextOption(Qt.AlignmentFlag.AlignCenter))
        return
    # object-fit: cover, cropped around the centre
    scale = max(target.width() / image.width(), target.height() / image.height())
    source_width = target.width() / scale
    source_height = target.height() / scale
    source = QRectF(
        (image.width() - source_width) / 2,
        (image.height() - source_height) / 2,
        source_width,
        source_height,
    )
    painter.drawImage(target, image, source)


def _paint_table(painter: QPainter, instruction: DrawInstruction, payload: TablePayload) -> None:
    style = instruction.style
    rect = _content_rect(instruction)
    column_width = rect.width() / max(1, len(payload.headers))
    row_height = style.font_size * 1.8
    painter.setPen(_color(style.color))
    painter.setFont(_font(style, bold=True))
    for column, header in enumerate(payload.headers):
        painter.drawText(QRectF(rect.x() + column * column_width, rect.y(), column_width, row_height), header)
    y = rect.y() + row_height
    painter.setPen(QPen(QColor("#e5e7eb"), 1))
    painter.drawLine(QPointF(rect.x(), y), QPointF(rect.x() + rect.width(), y))
    painter.setPen(_color(style.color))
    painter.setFont(_font(style))
    for row in payload.rows:
        for column, cell in enumerate(row):
            painter.drawText(QRectF(rect.x() + column * column_width, y + 4, column_width, row_height), cell)
        y += row_height


def _paint_divider(painter: QPainter, instruction: DrawInstruction, payload: DividerPayload) -> None:
    fill = QColor(instruction.style.background_color)
    if not fill.isValid() or fill.alpha() == 0:
        fill = _color(instruction.style.color)
    painter.fillRect(QRectF(instruction.x, instruction.y, instruction.width, payload.thickness), fill)


def _paint_signature(painter: QPainter, instruction: DrawInstruction, payload: SignaturePayload) -> None:
    style = instruction.style
    rect = _content_rect(instruction)
    painter.setFont(_font(style))
    painter.setPen(_color(style.color, "#374151"))
    painter.drawText(rect, payload.caption, QTextOption(Qt.AlignmentFlag.AlignHCenter))
    painter.setPen(QPen(QColor(MUTED_COLOR), 1))
    bottom = rect.y() + rect.height()
    painter.drawLine(QPointF(rect.x(), bottom), QPointF(rect.x() + rect.width(), bottom))


def _paint_checklist(painter: QPainter, instruction: DrawInstruction, payload: ChecklistPayload) -> None:
    style = instruction.style
    rect = _content_rect(instruction)
    row_height = max(16.0, style.font_size * 1.6)
    painter.setFont(_font(style))
    y = rect.y()
    for item in payload.items:
        box = QRectF(rect.x(), y + 2, 12, 12)
        painter.setPen(QPen(QColor("#6b7280"), 1))
        painter.setBrush(QColor(CHECKED_COLOR) if item.checked else QColor("white"))
        painter.drawRect(box)
        painter.setPen(_color(style.color))
        painter.drawText(QRectF(rect.x() + 18, y, rect.width() - 18, row_height), item.label)
        y += row_height


def _paint_fuel_mileage(painter: QPainter, instruction: DrawInstruction, payload: FuelMileagePayload) -> None:
    style = instruction.style
    rect = _content_rect(instruction)
    half = rect.width() / 2
    fields = ((payload.odometer_label, payload.odometer), (payload.fuel_label, payload.fuel_level))
    for column, (label, value) in enumerate(fields):
        x = rect.x() + column * half
        painter.setPen(QColor("#6b7280"))
        painter.setFont(_font(style, size=9))
        painter.drawText(QRectF(x, rect.y(), half, rect.height() / 2), label)
        painter.setPen(_color(style.color))
        painter.setFont(_font(style, bold=True))
        painter.drawText(QRectF(x, rect.y() + rect.height() / 2, half, rect.height() / 2), value)


def _paint_qr(painter: QPainter, instruction: DrawInstruction, payload: QrPayload) -> None:
    rect = _content_rect(instruction)
    rows = len(payload.cells)
    if rows == 0:
        return
    cell_height = rect.height() / rows
    for row_index, row in enumerate(payload.cells):
        cell_width = rect.width() / max(1, len(row))
        for column_index, filled in enumerate(row):
            if filled:
                painter.fillRect(
                    QRectF(
                        rect.x() + column_index * cell_width + 1,
                        rect.y() + row_index * cell_height + 1,
                        cell_width - 2,
                        cell_height - 2,
                    ),
                    QColor("#111827"),
                )


_PAINTERS: Dict[ElementKind, Callable] = {
    ElementKind.STATIC_TEXT: _paint_text,
    ElementKind.BOUND_TEXT: _paint_text,
    ElementKind.LOGO: _paint_logo,
    ElementKind.TABLE: _paint_table,
    ElementKind.DIVIDER: _paint_divider,
    ElementKind.SIGNATURE_AREA: _paint_signature,
    ElementKind.CHECKLIST: _paint_checklist,
    ElementKind.FUEL_MILEAGE: _paint_fuel_mileage,
    ElementKind.QR_PLACEHOLDER: _paint_qr,
}


def paint_instruction(painter: QPainter, instruction: DrawInstruction) -> None:
    style = instruction.style
    painter.save()
    painter.setOpacity(style.opacity)
    frame = QRectF(instruction.x, instruction.y, instruction.width, instruction.height)
    if instruction.kind != ElementKind.DIVIDER:
        background = QColor(style.background_color)
        border = QPen(Qt.PenStyle.NoPen)
        if style.border_width > 0:
            border = QPen(_color(style.border_color), style.border_width)
        if (background.isValid() and background.alpha() > 0) or style.border_width > 0:
            painter.setPen(border)
            painter.setBrush(background if background.isValid() else QColor(Qt.GlobalColor.transparent))
            painter.drawRoundedRect(frame, style.border_radius, style.border_radius)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    _PAINTERS[instruction.kind](painter, instruction, instruction.payload)
    painter.restore()


def paint_document(painter: QPainter, document: RenderedDocument) -> None:
    """Paint every instruction of ``document`` in paint order."""
    for instruction in document.instructions:
        paint_instruction(painter, instruction)


def document_to_image(document: RenderedDocument, scale: float = 1.0) -> QImage:
    """Rasterize ``document`` on a white page."""
    image = QImage(
        max(1, int(round(document.canvas_width * scale))),
        max(1, int(round(document.canvas_height * scale))),
        QImage.Format.Format_ARGB32,
    )
    image.fill(QColor("white"))
    painter = QPainter(image)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.scale(scale, scale)
    paint_document(painter, document)
    painter.end()
    return image


def export_pdf(document: RenderedDocument, file_path: str, title: str = "") -> bool:
    """Write ``document`` as a single-page PDF sized to its canvas.

    Returns False when the file cannot be opened for writing.
    """
    writer = QPdfWriter(file_path)
    writer.setTitle(title)
    writer.setResolution(PDF_RESOLUTION)
    writer.setPageSize(QPageSize(QSizeF(document.canvas_width, document.canvas_height), QPageSize.Unit.Point))
    writer.setPageMargins(QMarginsF(0, 0, 0, 0))

    painter = QPainter(writer)
    if not painter.isActive():
        LOGGER.error("Could not open %s for writing", file_path)
        return False
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setWindow(QRect(0, 0, int(round(document.canvas_width)), int(round(document.canvas_height))))
    paint_document(painter, document)
    painter.end()
    LOGGER.info("Exported %s", file_path)
    return True
