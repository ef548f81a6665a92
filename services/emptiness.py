"""Decide whether a flyer section has anything worth putting on a page.

Two independent checks are composed here:

* a content check on the rendered fragment markup (text, images, populated
  form controls, hyperlinks), and
* a data check keyed by section identity, for sections whose template always
  prints labels even when the backing fields are blank.
"""

import logging
import re

from bs4 import BeautifulSoup

from models.property_data import PropertyData, from_dict, has_comps
from models.sections import SectionKey

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = {"N/A", "-"}

_WHITESPACE = re.compile(r"\s+")
_TOGGLE_TYPES = {"checkbox", "radio"}


def _soup(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(["script", "style", "template"]):
        tag.decompose()
    return soup


def visible_text(markup) -> str:
    """Text content with whitespace runs collapsed to single spaces."""
    soup = markup if isinstance(markup, BeautifulSoup) else _soup(markup)
    text = soup.get_text(" ")
    return _WHITESPACE.sub(" ", text).strip()


def _control_value(tag) -> str:
    if tag.name == "textarea":
        return tag.get_text()
    if tag.name == "select":
        options = tag.find_all("option")
        chosen = next((o for o in options if o.has_attr("selected")), None)
        if chosen is None and options and not tag.has_attr("multiple"):
            chosen = options[0]
        if chosen is None:
            return ""
        return chosen.get("value", chosen.get_text())
    if (tag.get("type") or "").lower() in _TOGGLE_TYPES and not tag.has_attr("checked"):
        return ""
    return tag.get("value") or ""


def _has_populated_controls(soup: BeautifulSoup) -> bool:
    return any(_control_value(tag).strip() for tag in soup.find_all(["input", "textarea", "select"]))


def has_populated_controls(html: str) -> bool:
    return _has_populated_controls(_soup(html))


def is_fragment_empty(html: str) -> bool:
    """Content-only emptiness check of a rendered section."""
    soup = _soup(html)

    text = visible_text(soup)
    if text and text not in PLACEHOLDER_TEXT:
        return False

    if soup.find("img") is not None:
        return False

    if _has_populated_controls(soup):
        return False

    if soup.find("a", href=True) is not None:
        return False

    return True


# --- Data-derived rules ---

def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value


def _comps_empty(data: PropertyData) -> bool:
    return not has_comps(data)


def _financial_empty(data: PropertyData) -> bool:
    return not (data.purchase_price or data.arv or data.rehab_estimate)


def _property_empty(data: PropertyData) -> bool:
    return _blank(data.address)


def _exit_strategy_empty(data: PropertyData) -> bool:
    return _blank(data.exit_strategy) and _blank(data.rental_backup_details)


DOMAIN_RULES = {
    SectionKey.PROPERTY: _property_empty,
    SectionKey.FINANCIAL: _financial_empty,
    SectionKey.PROPERTY_OVERVIEW: None,
    SectionKey.PROPERTY_DETAILS: None,
    SectionKey.COMPS: _comps_empty,
    SectionKey.OCCUPANCY: None,
    SectionKey.ACCESS: None,
    SectionKey.EXIT_STRATEGY: _exit_strategy_empty,
    SectionKey.EMD_CLOSING: None,
    SectionKey.CONTACT: None,
}


def domain_says_empty(key: SectionKey, data) -> bool | None:
    """Data-derived verdict for ``key``, or None when the key has no rule."""
    rule = DOMAIN_RULES[SectionKey(key)]
    if rule is None or data is None:
        return None
    if isinstance(data, dict):
        data = from_dict(data)
    return rule(data)


def is_section_empty(fragment, key: SectionKey = None, data=None) -> bool:
    """Whether the paginator should skip this section entirely.

    A populated form control always keeps the section. Otherwise the
    data-derived rule for the section decides when one applies, and the
    content check decides for everything else.
    """
    key = SectionKey(key if key is not None else fragment.key)
    html = fragment.html if hasattr(fragment, "html") else fragment

    if has_populated_controls(html):
        return False

    verdict = domain_says_empty(key, data)
    if verdict is not None:
        logger.debug(f"Section '{key.value}' emptiness decided by data rule: {verdict}")
        return verdict

    return is_fragment_empty(html)
