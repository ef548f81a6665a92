"""Shareable URLs for published property flyers."""

from config import PUBLIC_BASE_URL, SUPABASE_URL


def public_base_url(fallback: str = "") -> str:
    """Configured public base URL without trailing slash, else ``fallback`` (request origin)."""
    if PUBLIC_BASE_URL and PUBLIC_BASE_URL.strip():
        return PUBLIC_BASE_URL.strip().rstrip("/")
    return (fallback or "").rstrip("/")


def build_absolute_share_url(path: str, fallback: str = "") -> str:
    return f"{public_base_url(fallback)}{path}"


def build_property_share_url(slug: str, fallback: str = "") -> str:
    """Link that serves Open Graph previews to crawlers before redirecting to the listing."""
    if SUPABASE_URL:
        return f"{SUPABASE_URL.rstrip('/')}/functions/v1/property-meta-preview?address={slug}"
    return build_absolute_share_url(f"/property?address={slug}", fallback)
