"""Built-in templates, one per document category.

The layouts are authored on the 800x1100 default canvas and are fully
deterministic for a given category and locale.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Tuple

from .constants import (
    CHECKLIST_PRESETS,
    DEFAULT_CANVAS_SIZE,
    DEFAULT_LOCALE,
    DEFAULT_STORE_NAME,
    SUPPORTED_LOCALES,
)
from .registry import checklist_content_from_seed
from .types import (
    BoundTextElement,
    ChecklistElement,
    Customer,
    DataContext,
    DividerElement,
    Element,
    ElementStyle,
    FuelMileageElement,
    Geometry,
    LogoElement,
    QrPlaceholderElement,
    Reservation,
    SignatureAreaElement,
    StaticTextElement,
    StoreInfo,
    TableElement,
    Template,
    TemplateCategory,
    Vehicle,
)

TEXTS: Dict[str, Dict[str, str]] = {
    "fr": {
        "quote": "DEVIS",
        "contract": "CONTRAT DE LOCATION",
        "deposit_receipt": "REÇU DE VERSEMENT",
        "invoice": "FACTURE",
        "check_in": "PV DE RESTITUTION",
        "check_out": "PV DE LIVRAISON",
        "quote_client": "Adressé à:\n{{client_name}}\n{{client_phone}}",
        "quote_vehicle": "Véhicule:\n{{vehicle_brand}} {{vehicle_model}}\n{{vehicle_plate}}",
        "quote_total": "Montant Total: {{total_amount}} DZ",
        "seller_signature": "Cachet et signature du vendeur",
        "contract_client": "Locataire: {{client_name}}\nTéléphone: {{client_phone}}\nEmail: {{client_email}}",
        "contract_vehicle": (
            "Véhicule: {{vehicle_brand}} {{vehicle_model}}\nImmatriculation: {{vehicle_plate}}\n"
            "Réservation: {{res_number}}\nDate: {{res_date}}"
        ),
        "contract_terms": (
            "CONDITIONS ET TERMES:\n\n"
            "1. Le locataire accepte de louer le véhicule mentionné ci-dessus\n"
            "2. Le conducteur accepte les conditions de sécurité\n"
            "3. Le paiement se fait avant la location\n"
            "4. Les dégâts doivent être signalés immédiatement"
        ),
        "renter_signature": "Signature du locataire",
        "agent_signature": "Signature de l'agent",
        "receipt_client": "Client: {{client_name}}\nDossier: {{res_number}}\nDate: {{res_date}}",
        "receipt_amounts": (
            "Montant Total: {{total_amount}} DZ\nMontant Payé: {{paid_amount}} DZ\n"
            "Reste à Payer: {{remaining_amount}} DZ"
        ),
        "receipt_details": (
            "Détails de la réservation:\nVéhicule: {{vehicle_brand}} {{vehicle_model}}\n"
            "Immatriculation: {{vehicle_plate}}"
        ),
        "branch_stamp": "Cachet de la succursale",
        "client_signature": "Signature du client",
        "invoice_store": "{{store_name}}\n{{store_address}}\n{{store_phone}} | {{store_email}}",
        "invoice_details": "Facture N°: {{res_number}}\nDate: {{current_date}}",
        "invoice_client": "Facturé à:\n{{client_name}}\n{{client_phone}}",
        "invoice_total": "TOTAL À PAYER: {{total_amount}} DZ",
        "invoice_balance": "Montant Payé: {{paid_amount}} DZ\nReste à Payer: {{remaining_amount}} DZ",
        "invoice_thanks": "Merci pour votre confiance",
        "inspection_header": (
            "Client: {{client_name}}\nVéhicule: {{vehicle_brand}} {{vehicle_model}}\n"
            "Immatriculation: {{vehicle_plate}}\nDossier: {{res_number}} | {{current_date}}"
        ),
        "security_title": "Contrôle Sécurité",
        "equipment_title": "Équipements Obligatoires",
    },
    "ar": {
        "quote": "عرض سعر",
        "contract": "عقد إيجار",
        "deposit_receipt": "وصل دفع",
        "invoice": "فاتورة",
        "check_in": "محضر استلام",
        "check_out": "محضر تسليم",
        "quote_client": "موجه إلى:\n{{client_name}}\n{{client_phone}}",
        "quote_vehicle": "المركبة:\n{{vehicle_brand}} {{vehicle_model}}\n{{vehicle_plate}}",
        "quote_total": "المبلغ الإجمالي: {{total_amount}} دج",
        "seller_signature": "ختم وتوقيع البائع",
        "contract_client": "المستأجر: {{client_name}}\nالهاتف: {{client_phone}}\nالبريد: {{client_email}}",
        "contract_vehicle": (
            "المركبة: {{vehicle_brand}} {{vehicle_model}}\nالترقيم: {{vehicle_plate}}\n"
            "الحجز: {{res_number}}\nالتاريخ: {{res_date}}"
        ),
        "contract_terms": (
            "الشروط والأحكام:\n\n"
            "1. يوافق المستأجر على استئجار المركبة المذكورة أعلاه\n"
            "2. يوافق السائق على شروط السلامة\n"
            "3. يتم الدفع قبل الإيجار\n"
            "4. يجب الإبلاغ عن الأضرار فوراً"
        ),
        "renter_signature": "توقيع المستأجر",
        "agent_signature": "توقيع الوكيل",
        "receipt_client": "الزبون: {{client_name}}\nالملف: {{res_number}}\nالتاريخ: {{res_date}}",
        "receipt_amounts": (
            "المبلغ الإجمالي: {{total_amount}} دج\nالمبلغ المدفوع: {{paid_amount}} دج\n"
            "المبلغ المتبقي: {{remaining_amount}} دج"
        ),
        "receipt_details": (
            "تفاصيل الحجز:\nالمركبة: {{vehicle_brand}} {{vehicle_model}}\nالترقيم: {{vehicle_plate}}"
        ),
        "branch_stamp": "ختم الفرع",
        "client_signature": "توقيع الزبون",
        "invoice_store": "{{store_name}}\n{{store_address}}\n{{store_phone}} | {{store_email}}",
        "invoice_details": "فاتورة رقم: {{res_number}}\nالتاريخ: {{current_date}}",
        "invoice_client": "فاتورة إلى:\n{{client_name}}\n{{client_phone}}",
        "invoice_total": "المبلغ الواجب دفعه: {{total_amount}} دج",
        "invoice_balance": "المبلغ المدفوع: {{paid_amount}} دج\nالمبلغ المتبقي: {{remaining_amount}} دج",
        "invoice_thanks": "شكراً لثقتكم",
        "inspection_header": (
            "الزبون: {{client_name}}\nالمركبة: {{vehicle_brand}} {{vehicle_model}}\n"
            "الترقيم: {{vehicle_plate}}\nالملف: {{res_number}} | {{current_date}}"
        ),
        "security_title": "مراقبة السلامة",
        "equipment_title": "التجهيزات الإلزامية",
    },
}

TEMPLATE_NAMES: Dict[str, Dict[TemplateCategory, str]] = {
    "fr": {
        TemplateCategory.QUOTE: "Modèle Devis",
        TemplateCategory.CONTRACT: "Modèle Contrat",
        TemplateCategory.DEPOSIT_RECEIPT: "Modèle Reçu de Versement",
        TemplateCategory.INVOICE: "Modèle Facture",
        TemplateCategory.CHECK_IN: "Modèle Check-in",
        TemplateCategory.CHECK_OUT: "Modèle Check-out",
    },
    "ar": {
        TemplateCategory.QUOTE: "نموذج عرض سعر",
        TemplateCategory.CONTRACT: "نموذج عقد",
        TemplateCategory.DEPOSIT_RECEIPT: "نموذج وصل دفع",
        TemplateCategory.INVOICE: "نموذج فاتورة",
        TemplateCategory.CHECK_IN: "نموذج استلام",
        TemplateCategory.CHECK_OUT: "نموذج تسليم",
    },
}

# Shared style presets, expressed as overrides of ElementStyle defaults.
_LOGO = {"font_weight": "700", "text_align": "center", "padding": 8.0}
_TITLE = {"font_size": 28.0, "color": "#1f2937", "font_weight": "900", "text_align": "center", "padding": 8.0}
_BODY = {"font_size": 11.0, "color": "#374151", "padding": 8.0}
_BOXED = {"font_size": 11.0, "color": "#374151", "background_color": "#f3f4f6", "border_width": 1.0, "padding": 8.0}
_TOTAL = {"font_size": 16.0, "color": "#dc2626", "font_weight": "900", "text_align": "right", "padding": 8.0}
_SIGNATURE = {
    "font_size": 10.0,
    "color": "#6b7280",
    "text_align": "center",
    "border_color": "#d1d5db",
    "border_width": 1.0,
    "padding": 8.0,
}
_DIVIDER = {"color": "#d1d5db", "background_color": "#d1d5db", "border_color": "#d1d5db", "padding": 0.0}
_TABLE = {"font_size": 10.0, "font_weight": "600", "padding": 8.0}
_CHECKLIST = {"font_size": 10.0, "padding": 8.0}

Box = Tuple[float, float, float, float]


def _style(overrides: Dict[str, Any], **extra: Any) -> ElementStyle:
    values = dict(overrides)
    values.update(extra)
    return ElementStyle(**values)


def _geometry(box: Box) -> Geometry:
    x, y, width, height = box
    return Geometry(x=float(x), y=float(y), width=float(width), height=float(height))


def _logo(box: Box) -> Element:
    return LogoElement(id="logo_0", geometry=_geometry(box), style=_style(_LOGO), label="LOGO")


def _title(text: str, box: Box, **extra: Any) -> Element:
    return StaticTextElement(id="static_text_1", geometry=_geometry(box), style=_style(_TITLE, **extra), text=text)


def _bound(element_id: str, text: str, box: Box, preset: Dict[str, Any], **extra: Any) -> Element:
    return BoundTextElement(id=element_id, geometry=_geometry(box), style=_style(preset, **extra), text=text)


def _signature(element_id: str, caption: str, box: Box) -> Element:
    return SignatureAreaElement(id=element_id, geometry=_geometry(box), style=_style(_SIGNATURE), caption=caption)


def _quote(t: Dict[str, str]) -> List[Element]:
    return [
        _logo((50, 30, 100, 60)),
        _title(t["quote"], (350, 50, 200, 40), font_size=32.0),
        _bound("bound_text_2", t["quote_client"], (50, 150, 300, 80), _BODY),
        _bound("bound_text_3", t["quote_vehicle"], (450, 150, 300, 80), _BODY),
        DividerElement(id="divider_4", geometry=_geometry((50, 260, 700, 2)), style=_style(_DIVIDER)),
        TableElement(id="table_5", geometry=_geometry((50, 290, 700, 150)), style=_style(_TABLE)),
        _bound("bound_text_6", t["quote_total"], (450, 500, 300, 40), _TOTAL),
        _signature("signature_area_7", t["seller_signature"], (50, 600, 250, 150)),
    ]


def _contract(t: Dict[str, str]) -> List[Element]:
    return [
        _logo((50, 30, 100, 60)),
        _title(t["contract"], (200, 50, 400, 50)),
        _bound("bound_text_2", t["contract_client"], (50, 150, 350, 100), _BOXED),
        _bound("bound_text_3", t["contract_vehicle"], (450, 150, 300, 100), _BOXED),
        StaticTextElement(
            id="static_text_4",
            geometry=_geometry((50, 280, 700, 200)),
            style=_style(_BODY, font_size=9.0, color="#1f2937"),
            text=t["contract_terms"],
        ),
        _signature("signature_area_5", t["renter_signature"], (50, 520, 300, 80)),
        _signature("signature_area_6", t["agent_signature"], (450, 520, 300, 80)),
    ]


def _deposit_receipt(t: Dict[str, str]) -> List[Element]:
    return [
        _logo((50, 30, 100, 60)),
        _title(t["deposit_receipt"], (250, 50, 300, 50)),
        _bound("bound_text_2", t["receipt_client"], (50, 140, 700, 60), _BOXED),
        _bound(
            "bound_text_3",
            t["receipt_amounts"],
            (50, 230, 700, 100),
            _BOXED,
            font_size=13.0,
            color="#1f2937",
            font_weight="600",
            background_color="#dbeafe",
            border_color="#0ea5e9",
            border_width=2.0,
        ),
        _bound("bound_text_4", t["receipt_details"], (50, 360, 700, 80), _BODY, font_size=10.0),
        _signature("signature_area_5", t["branch_stamp"], (50, 480, 300, 100)),
        _signature("signature_area_6", t["client_signature"], (450, 480, 300, 100)),
    ]


def _invoice(t: Dict[str, str]) -> List[Element]:
    return [
        _logo((50, 30, 100, 60)),
        _title(t["invoice"], (400, 30, 250, 50), font_size=32.0, text_align="right"),
        _bound("bound_text_2", t["invoice_details"], (400, 80, 250, 40), _BODY, font_size=10.0, font_weight="700", text_align="right"),
        _bound("bound_text_3", t["invoice_store"], (50, 120, 350, 80), _BODY, font_size=9.0, color="#6b7280"),
        _bound("bound_text_4", t["invoice_client"], (450, 130, 300, 80), _BOXED, font_size=10.0),
        TableElement(id="table_5", geometry=_geometry((50, 230, 700, 150)), style=_style(_TABLE)),
        _bound("bound_text_6", t["invoice_total"], (450, 420, 300, 40), _TOTAL, font_size=18.0),
        _bound("bound_text_7", t["invoice_balance"], (450, 465, 300, 50), _BODY, text_align="right"),
        StaticTextElement(
            id="static_text_8",
            geometry=_geometry((50, 540, 700, 40)),
            style=_style(_BODY, color="#6b7280", text_align="center"),
            text=t["invoice_thanks"],
        ),
    ]


def _inspection(title_key: str, t: Dict[str, str]) -> List[Element]:
    return [
        _logo((50, 30, 100, 60)),
        _title(t[title_key], (250, 40, 400, 50)),
        _bound("bound_text_2", t["inspection_header"], (50, 120, 700, 100), _BOXED),
        FuelMileageElement(
            id="fuel_mileage_3",
            geometry=_geometry((50, 245, 450, 70)),
            style=_style(_BODY, font_size=10.0, font_weight="900", background_color="#f9fafb", border_radius=16.0),
        ),
        QrPlaceholderElement(id="qr_placeholder_4", geometry=_geometry((650, 240, 80, 80)), style=_style(_BODY)),
        StaticTextElement(
            id="static_text_5",
            geometry=_geometry((50, 340, 340, 24)),
            style=_style(_BODY, font_size=10.0, font_weight="900"),
            text=t["security_title"],
        ),
        ChecklistElement(
            id="checklist_6",
            geometry=_geometry((50, 370, 340, 220)),
            style=_style(_CHECKLIST),
            content=checklist_content_from_seed(CHECKLIST_PRESETS["security"]),
        ),
        StaticTextElement(
            id="static_text_7",
            geometry=_geometry((410, 340, 340, 24)),
            style=_style(_BODY, font_size=10.0, font_weight="900"),
            text=t["equipment_title"],
        ),
        ChecklistElement(
            id="checklist_8",
            geometry=_geometry((410, 370, 340, 160)),
            style=_style(_CHECKLIST),
            content=checklist_content_from_seed(CHECKLIST_PRESETS["equipment"]),
        ),
        _signature("signature_area_9", t["agent_signature"], (50, 630, 300, 100)),
        _signature("signature_area_10", t["client_signature"], (450, 630, 300, 100)),
    ]


def _layout(category: TemplateCategory, t: Dict[str, str]) -> List[Element]:
    if category == TemplateCategory.QUOTE:
        return _quote(t)
    if category == TemplateCategory.CONTRACT:
        return _contract(t)
    if category == TemplateCategory.DEPOSIT_RECEIPT:
        return _deposit_receipt(t)
    if category == TemplateCategory.INVOICE:
        return _invoice(t)
    if category == TemplateCategory.CHECK_IN:
        return _inspection("check_in", t)
    return _inspection("check_out", t)


def build_default_template(category: TemplateCategory, locale: str) -> Template:
    """Return the built-in template for ``category``; unknown locales use French."""
    if locale not in SUPPORTED_LOCALES:
        locale = DEFAULT_LOCALE
    width, height = DEFAULT_CANVAS_SIZE
    return Template(
        id=f"tpl-default-{category.value}-{locale}",
        name=TEMPLATE_NAMES[locale][category],
        category=category,
        canvas_width=width,
        canvas_height=height,
        elements=tuple(_layout(category, TEXTS[locale])),
    )


def sample_context() -> DataContext:
    """Return demo business data used by the editor preview."""
    return DataContext(
        customer=Customer(first_name="Karim", last_name="Benali", phone="0550 12 34 56", email="k.benali@gmail.com"),
        vehicle=Vehicle(brand="Volkswagen", model="Golf 8 R-Line", plate="01234-124-16"),
        reservation=Reservation(number="RES-0001", start_date=date.today(), total_amount=100000, paid_amount=25000),
        store=StoreInfo(name=DEFAULT_STORE_NAME, phone="0550 00 00 00", address="Alger"),
    )
