"""Placeholder substitution for bound text.

Tokens have the fixed form ``{{name}}``. Names outside :data:`PLACEHOLDERS`
are left in place so a broken template shows the problem on paper instead
of silently dropping text.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Dict, List, Optional

from .constants import DEFAULT_LOCALE, DEFAULT_STORE_NAME, LOCALE_FORMATS, PLACEHOLDERS
from .types import DataContext

TOKEN_RE = re.compile(r"\{\{([A-Za-z_][A-Za-z0-9_]*)\}\}")


def _locale_formats(locale: str) -> Dict[str, str]:
    return LOCALE_FORMATS.get(locale, LOCALE_FORMATS[DEFAULT_LOCALE])


def format_amount(value: float, locale: str = DEFAULT_LOCALE) -> str:
    """Format a currency amount as a grouped integer, e.g. ``75 000`` in French."""
    amount = int(round(value))
    grouped = f"{abs(amount):,}".replace(",", _locale_formats(locale)["grouping"])
    return f"-{grouped}" if amount < 0 else grouped


def format_date(value: Optional[date], locale: str = DEFAULT_LOCALE) -> str:
    if value is None:
        return ""
    return value.strftime(_locale_formats(locale)["date"])


def _clean(value: str) -> str:
    # Resolved values must never form a token with the surrounding text.
    return value.replace("{", "").replace("}", "")


def resolve_placeholders(context: DataContext, locale: str = DEFAULT_LOCALE) -> Dict[str, str]:
    """Return the resolved value of every placeholder in the vocabulary."""
    customer = context.customer
    vehicle = context.vehicle
    reservation = context.reservation
    store = context.store
    values = {
        "client_name": customer.full_name,
        "client_phone": customer.phone,
        "client_email": customer.email,
        "vehicle_brand": vehicle.brand,
        "vehicle_model": vehicle.model,
        "vehicle_plate": vehicle.plate,
        "res_number": reservation.number,
        "res_date": format_date(reservation.start_date, locale),
        "total_amount": format_amount(reservation.total_amount, locale),
        "paid_amount": format_amount(reservation.paid_amount, locale),
        "remaining_amount": format_amount(reservation.total_amount - reservation.paid_amount, locale),
        "store_name": store.name or DEFAULT_STORE_NAME,
        "store_phone": store.phone,
        "store_email": store.email,
        "store_address": store.address,
        "current_date": format_date(context.current_date, locale),
    }
    return {name: _clean(values[name] or "") for name in PLACEHOLDERS}


def substitute(text: str, context: DataContext, locale: str = DEFAULT_LOCALE) -> str:
    """Replace every recognised ``{{token}}`` in ``text``.

    Unknown tokens are kept verbatim. Running the function on its own output
    is a no-op.
    """
    if not text or "{{" not in text:
        return text
    values = resolve_placeholders(context, locale)

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in values:
            return values[name]
        return match.group(0)

    return TOKEN_RE.sub(_replace, text)


def find_placeholders(text: str) -> List[str]:
    """Return token names in ``text`` in order of first appearance."""
    seen: List[str] = []
    for match in TOKEN_RE.finditer(text or ""):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


def unknown_placeholders(text: str) -> List[str]:
    return [name for name in find_placeholders(text) if name not in PLACEHOLDERS]
