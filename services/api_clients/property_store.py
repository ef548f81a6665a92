"""Property persistence on the hosted Supabase (PostgREST) backend."""

import logging
import requests

from config import SUPABASE_URL, SUPABASE_KEY
from models.property_data import address_slug

logger = logging.getLogger(__name__)

TIMEOUT = 15
TABLE = "properties"


class PropertyStore:
    """Reads and writes property records keyed by the address slug."""

    def __init__(self, url: str = None, api_key: str = None):
        self.url = (url or SUPABASE_URL).rstrip("/")
        self.api_key = api_key or SUPABASE_KEY
        self.session = requests.Session()
        self.session.headers.update({
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        })

    def _configured(self) -> bool:
        return bool(self.url and self.api_key)

    def get_public_property(self, slug: str) -> dict:
        """Public listing data for ``slug`` (via the get_public_property_data RPC)."""
        if not self._configured():
            return {"error": "SUPABASE_URL / SUPABASE_KEY not configured"}
        if not slug:
            return {"error": "No property address provided"}

        try:
            resp = self.session.post(
                f"{self.url}/rest/v1/rpc/get_public_property_data",
                json={"property_address": slug},
                timeout=TIMEOUT,
            )
            resp.raise_for_status()
            rows = resp.json()
        except Exception as e:
            logger.warning(f"Supabase error for {slug}: {e}")
            return {"error": "Database error occurred"}

        if isinstance(rows, list):
            rows = rows[0] if rows else None
        if not rows:
            return {"error": "Property not found in database"}
        if not rows.get("html_content"):
            return {"error": "Property HTML content not found"}
        return rows

    def save_property(self, data: dict, html_content: str = "") -> dict:
        """Upsert the form fields plus generated HTML; returns the stored row."""
        if not self._configured():
            return {"error": "SUPABASE_URL / SUPABASE_KEY not configured"}

        slug = address_slug(data.get("address", ""))
        if not slug:
            return {"error": "Address is required"}

        record = {
            "property_address": slug,
            "address": data.get("address", ""),
            "form_data": data,
            "html_content": html_content,
        }
        try:
            resp = self.session.post(
                f"{self.url}/rest/v1/{TABLE}",
                params={"on_conflict": "property_address"},
                json=record,
                headers={"Prefer": "resolution=merge-duplicates,return=representation"},
                timeout=TIMEOUT,
            )
            resp.raise_for_status()
            rows = resp.json()
        except Exception as e:
            logger.warning(f"Supabase save failed for {slug}: {e}")
            return {"error": str(e)}

        logger.info(f"Saved property {slug}")
        return rows[0] if isinstance(rows, list) and rows else record
