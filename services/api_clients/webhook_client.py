"""Client for the external flyer webhook that returns pre-built HTML flyers.

This is the printable-HTML delivery mode: the webhook renders the whole
flyer and the browser prints it. It does not go through the paginator.
"""

import logging
import requests
from bs4 import BeautifulSoup

from config import FLYER_WEBHOOK_URL

logger = logging.getLogger(__name__)

TIMEOUT = 120  # generation is LLM-driven and slow


class FlyerWebhookClient:
    """POSTs property data as JSON and receives a complete HTML document."""

    def __init__(self, url: str = None):
        self.url = url or FLYER_WEBHOOK_URL
        self.session = requests.Session()

    def generate_html(self, data: dict) -> dict:
        """Return {"html": ...} on success or {"error": ...}."""
        if not self.url:
            return {"error": "FLYER_WEBHOOK_URL not configured"}

        try:
            resp = self.session.post(self.url, json=data, timeout=TIMEOUT)
            resp.raise_for_status()
        except Exception as e:
            logger.warning(f"Flyer webhook error: {e}")
            return {"error": str(e)}

        html = _html_from_response(resp)
        if not html.strip():
            logger.warning("Flyer webhook returned an empty document")
            return {"error": "Webhook returned no HTML"}
        logger.info(f"Flyer webhook returned {len(html)} chars of HTML")
        return {"html": html}


def _html_from_response(resp) -> str:
    """The webhook answers either with raw HTML or with JSON wrapping it."""
    content_type = resp.headers.get("Content-Type", "")
    if "json" not in content_type:
        return resp.text
    payload = resp.json()
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if isinstance(payload, dict):
        for key in ("html", "html_content", "output"):
            if isinstance(payload.get(key), str):
                return payload[key]
    if isinstance(payload, str):
        return payload
    return ""


def extract_printable_html(html: str) -> str:
    """Use the iframe's srcdoc when the flyer arrives wrapped in an iframe."""
    soup = BeautifulSoup(html or "", "html.parser")
    iframe = soup.find("iframe")
    if iframe is not None and iframe.get("srcdoc"):
        return iframe["srcdoc"]
    return html or ""
