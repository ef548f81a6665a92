"""ATTOM property API client used to pre-fill the property form."""

import logging
import requests

from config import ATTOM_API_KEY

logger = logging.getLogger(__name__)

BASE_URL = "https://api.gateway.attomdata.com/propertyapi/v1.0.0"
TIMEOUT = 50


def split_address(address: str) -> tuple[str, str] | None:
    """'4529 Winona Court, Denver, CO' -> ('4529 Winona Court', 'Denver, CO')."""
    parts = [p.strip() for p in (address or "").split(",")]
    if len(parts) < 2:
        return None
    return parts[0], ", ".join(parts[1:])


def _str(val):
    return str(val) if val is not None else None


class AttomClient:
    """Client for the ATTOM basic property profile endpoint."""

    def __init__(self, api_key: str = None):
        self.api_key = api_key or ATTOM_API_KEY
        self.session = requests.Session()

    def fetch_property_details(self, address: str) -> dict:
        if not address:
            return {"error": "Address is required"}
        parts = split_address(address)
        if parts is None:
            return {"error": 'Address must include street, city, and state '
                             '(e.g., "4529 Winona Court, Denver, CO")'}
        if not self.api_key:
            return {"error": "ATTOM_API_KEY not configured"}

        address1, address2 = parts
        try:
            resp = self.session.get(
                f"{BASE_URL}/property/basicprofile",
                params={"address1": address1, "address2": address2},
                headers={"Accept": "application/json", "apikey": self.api_key},
                timeout=TIMEOUT,
            )
        except requests.Timeout:
            logger.error("ATTOM API request timed out")
            return {"error": f"ATTOM API request timed out after {TIMEOUT} seconds"}
        except Exception as e:
            logger.error(f"ATTOM API fetch error: {e}")
            return {"error": f"Failed to fetch from ATTOM API: {e}"}

        if not resp.ok:
            logger.error(f"ATTOM API error: {resp.status_code} {resp.text[:200]}")
            return {"error": f"ATTOM API error: {resp.status_code}"}

        properties = resp.json().get("property") or []
        if not properties:
            return {"error": "No property data found for this address"}
        return extract_details(properties[0])


def extract_details(prop: dict) -> dict:
    """Flatten the fields the flyer form cares about."""
    building = prop.get("building") or {}
    rooms = building.get("rooms") or {}
    size = building.get("size") or {}
    lot = prop.get("lot") or {}
    addr = prop.get("address") or {}
    sale = prop.get("sale") or {}
    sale_amount = sale.get("saleAmountData") or {}
    return {
        "bedrooms": _str(rooms.get("beds")),
        "bathrooms": _str(rooms.get("bathsTotal")),
        "bathsFull": _str(rooms.get("bathsFull")),
        "squareFootage": _str(size.get("livingSize")),
        "yearBuilt": _str((prop.get("summary") or {}).get("yearBuilt")),
        "zoning": lot.get("zoningType"),
        "lotSizeAcres": lot.get("lotSize1"),
        "lotSizeSqFt": lot.get("lotSize2"),
        "addressOneLine": addr.get("oneLine"),
        "addressLine1": addr.get("line1"),
        "addressLocality": addr.get("locality"),
        "addressCountrySubd": addr.get("countrySubd"),
        "addressPostal1": addr.get("postal1"),
        "salePrice": _str(sale_amount.get("saleAmt")),
        "saleTransDate": sale.get("saleTransDate"),
        "saleRecDate": sale_amount.get("saleRecDate"),
    }
