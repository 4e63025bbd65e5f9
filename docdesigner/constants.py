"""Constants and presets for document templates."""

from typing import Any, Dict, List, Tuple

from .types import ElementKind


CLIPBOARD_MIME_TYPE = "application/x-docdesigner-element"
CLIPBOARD_FORMAT = "docdesigner-element"
TEMPLATE_FORMAT = "docdesigner-template"
TEMPLATE_FORMAT_VERSION = 1
TEMPLATE_FILE_SUFFIX = ".doctpl"
PDF_FILE_SUFFIX = ".pdf"

# Default pages are authored on a tall 800x1100 canvas; blank designs start on A4 points.
DEFAULT_CANVAS_SIZE: Tuple[float, float] = (800.0, 1100.0)
BLANK_CANVAS_SIZE: Tuple[float, float] = (595.0, 842.0)

DEFAULT_ANCHOR: Tuple[float, float] = (50.0, 150.0)
DUPLICATE_OFFSET = 20.0
MIN_ELEMENT_SIZE = 10.0
MIN_DIVIDER_THICKNESS = 1.0

DEFAULT_LOCALE = "fr"
SUPPORTED_LOCALES = ("fr", "ar")
DEFAULT_STORE_NAME = "DriveFlow"
CURRENCY_SUFFIX = "DZ"

PLACEHOLDERS = (
    "client_name",
    "client_phone",
    "client_email",
    "vehicle_brand",
    "vehicle_model",
    "vehicle_plate",
    "res_number",
    "res_date",
    "total_amount",
    "paid_amount",
    "remaining_amount",
    "store_name",
    "store_phone",
    "store_email",
    "store_address",
    "current_date",
)

# Thousands separator and short date pattern per locale.
LOCALE_FORMATS: Dict[str, Dict[str, str]] = {
    "fr": {"grouping": " ", "date": "%d/%m/%Y"},
    "ar": {"grouping": ".", "date": "%d/%m/%Y"},
    "en": {"grouping": ",", "date": "%m/%d/%Y"},
}

TABLE_HEADERS: Dict[str, Tuple[str, str, str]] = {
    "fr": ("Désignation", "Qté", "Montant"),
    "ar": ("البيان", "الكمية", "المبلغ"),
    "en": ("Description", "Qty", "Amount"),
}
TABLE_DESIGNATION = "Location {{vehicle_brand}} {{vehicle_model}}"
TABLE_AMOUNT = "{{total_amount}} " + CURRENCY_SUFFIX

# Fuel/mileage and QR blocks are not bound to inspection records yet.
FUEL_MILEAGE_PLACEHOLDER = ("15,400 KM", "8/8")
FUEL_MILEAGE_LABELS: Dict[str, Tuple[str, str]] = {
    "fr": ("Odomètre", "Niveau Carburant"),
    "ar": ("العداد", "مستوى الوقود"),
    "en": ("Odometer", "Fuel level"),
}
QR_GRID_SIZE = 3


CHECKLIST_PRESETS: Dict[str, List[str]] = {
    "security": [
        "Feux & Phares",
        "Pneus (Usure/Pression)",
        "Freins",
        "Essuie-glaces",
        "Rétroviseurs",
        "Ceintures",
        "Klaxon",
    ],
    "equipment": [
        "Roue de secours",
        "Cric",
        "Triangles",
        "Trousse secours",
        "Docs véhicule",
    ],
    "full": [
        "Feux & Phares",
        "Pneus (Usure/Pression)",
        "Freins",
        "Essuie-glaces",
        "Rétroviseurs",
        "Ceintures",
        "Klaxon",
        "Roue de secours",
        "Cric",
        "Triangles",
        "Trousse secours",
        "Docs véhicule",
        "Climatisation (A/C)",
        "Intérieur Propre",
        "Extérieur Propre",
    ],
}


ELEMENT_PRESETS: Dict[ElementKind, Dict[str, Any]] = {
    ElementKind.STATIC_TEXT: {
        "width": 200.0,
        "height": 40.0,
        "content": "Texte Statique",
    },
    ElementKind.BOUND_TEXT: {
        "width": 200.0,
        "height": 40.0,
        "content": "{{client_name}}",
    },
    ElementKind.LOGO: {
        "width": 200.0,
        "height": 40.0,
        "content": "LOGO",
        "style": {"font_weight": "700", "text_align": "center"},
    },
    ElementKind.TABLE: {
        "width": 500.0,
        "height": 40.0,
        "content": "",
        "style": {"font_size": 10.0, "font_weight": "600"},
    },
    ElementKind.DIVIDER: {
        "width": 500.0,
        "height": 2.0,
        "content": "",
        "style": {"background_color": "#d1d5db", "padding": 0.0},
    },
    ElementKind.SIGNATURE_AREA: {
        "width": 200.0,
        "height": 40.0,
        "content": "Zone Signature",
        "style": {
            "font_size": 10.0,
            "color": "#6b7280",
            "text_align": "center",
            "border_width": 1.0,
            "border_color": "#d1d5db",
        },
    },
    ElementKind.CHECKLIST: {
        "width": 500.0,
        "height": 180.0,
        "content": "security",
    },
    ElementKind.FUEL_MILEAGE: {
        "width": 200.0,
        "height": 40.0,
        "content": "",
        "style": {"font_size": 10.0, "font_weight": "900"},
    },
    ElementKind.QR_PLACEHOLDER: {
        "width": 200.0,
        "height": 40.0,
        "content": "",
    },
}
