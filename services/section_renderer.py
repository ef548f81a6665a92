"""Render flyer sections from Jinja2 templates.

Each section template emits one root element tagged ``data-pdf-section``.
Sections whose template has nothing to show emit no root at all; the
header, financial, comps and exit strategy sections always emit theirs and
leave the skip decision to the emptiness rules.
"""

import logging

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import TEMPLATE_DIR
from models.property_data import (
    COMP_CATEGORIES, PropertyData, calculate_financials, format_currency,
    format_number, from_dict, generate_titles,
)
from models.sections import SECTION_ORDER

logger = logging.getLogger(__name__)

COMP_TITLES = {
    "pending_comps": "Pending Flipped Comps",
    "sold_comps": "Sold Flipped Comps",
    "rental_comps": "Rental Comps",
    "new_construction_comps": "New Construction Comps",
    "as_is_comps": "Sold As-Is Comps",
}

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["currency"] = format_currency
_env.filters["number"] = format_number
_env.filters["label"] = lambda value: (value or "").replace("-", " ").upper()


def _context(data: PropertyData) -> dict:
    fin = calculate_financials(data.purchase_price, data.rehab_estimate, data.arv,
                               data.selling_costs)
    comp_groups = []
    for category in COMP_CATEGORIES:
        entries = [c.strip() for c in getattr(data, category) if (c or "").strip()]
        if entries:
            comp_groups.append({"title": COMP_TITLES[category], "entries": entries})
    return {
        "d": data,
        "fin": fin,
        "titles": generate_titles(data),
        "comp_groups": comp_groups,
    }


def render_section(key, data) -> str:
    if isinstance(data, dict):
        data = from_dict(data)
    template = _env.get_template(f"flyer/{key.value}.html")
    return template.render(**_context(data)).strip()


def render_sections(data) -> list[tuple]:
    """(key, html) for every section in flyer order; html may be empty."""
    if isinstance(data, dict):
        data = from_dict(data)
    return [(key, render_section(key, data)) for key in SECTION_ORDER]


def render_page(data) -> str:
    """Full HTML page stacking every section, ready for the headless browser."""
    sections = render_sections(data)
    logger.info(f"Rendered {sum(1 for _, html in sections if html)} flyer section templates")
    return _env.get_template("flyer/page.html").render(
        sections=[html for _, html in sections if html],
    )
