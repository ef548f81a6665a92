"""Render flyer sections to bitmaps with headless Chromium (Playwright)."""

import logging
from io import BytesIO
from typing import Protocol

from PIL import Image
from playwright.async_api import async_playwright

from config import BROWSER_VIEWPORT_WIDTH, BROWSER_TIMEOUT_MS
from models.sections import Bitmap, Box, Fragment, LinkBox, RasterizedSection, SectionKey
from services.errors import RasterizationError

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 2.0
DEFAULT_BACKGROUND = "#ffffff"
SECTION_SELECTOR = '[data-pdf-section="{key}"]'

# Copies live control state into attributes so the outerHTML snapshot keeps it,
# then measures every requested section and its anchors in page coordinates.
_MEASURE_JS = """(keys) => {
  document.querySelectorAll('input').forEach(el => {
    if (el.type === 'checkbox' || el.type === 'radio') {
      if (el.checked) el.setAttribute('checked', ''); else el.removeAttribute('checked');
    } else {
      el.setAttribute('value', el.value);
    }
  });
  document.querySelectorAll('textarea').forEach(el => { el.textContent = el.value; });
  document.querySelectorAll('select option').forEach(o => {
    if (o.selected) o.setAttribute('selected', ''); else o.removeAttribute('selected');
  });
  const box = (r) => ({
    x: r.left + window.scrollX, y: r.top + window.scrollY, width: r.width, height: r.height,
  });
  return keys.map(key => {
    const el = document.querySelector(`[data-pdf-section="${key}"]`);
    if (!el) return null;
    const links = Array.from(el.querySelectorAll('a[href]')).map(a => ({
      href: a.getAttribute('href'), ...box(a.getBoundingClientRect()),
    }));
    return {
      key,
      head: document.head ? document.head.innerHTML : '',
      html: el.outerHTML,
      bounds: box(el.getBoundingClientRect()),
      links,
    };
  });
}"""

_DOCUMENT = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8">{head}
<style>html, body {{ margin: 0; padding: 0; background: {background}; }}</style>
</head>
<body><div style="width: {width}px">{body}</div></body>
</html>"""


class Rasterizer(Protocol):
    """Anything that can turn a measured fragment into a bitmap."""

    async def rasterize(self, fragment: Fragment, scale: float,
                        background: str) -> Bitmap: ...


class PlaywrightRasterizer:
    """Owns one Chromium instance for a generation run.

    ``measure`` lays out the whole flyer once to capture section geometry;
    ``rasterize`` re-renders a single section at a given device scale.
    """

    def __init__(self, viewport_width: int = BROWSER_VIEWPORT_WIDTH,
                 timeout_ms: int = BROWSER_TIMEOUT_MS):
        self.viewport_width = viewport_width
        self.timeout_ms = timeout_ms
        self._playwright = None
        self._browser = None
        self._head = ""

    async def __aenter__(self):
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._playwright = None

    async def _new_page(self, scale: float = 1.0):
        context = await self._browser.new_context(
            viewport={"width": self.viewport_width, "height": 1000},
            device_scale_factor=scale,
            bypass_csp=True,
        )
        context.set_default_timeout(self.timeout_ms)
        return context, await context.new_page()

    async def measure(self, page_html: str, keys) -> list[Fragment]:
        """Lay out the flyer page and snapshot each present section, in ``keys`` order."""
        keys = [SectionKey(k) for k in keys]
        context, page = await self._new_page()
        try:
            # networkidle: externally hosted photos must finish loading first
            await page.set_content(page_html, wait_until="networkidle")
            measured = await page.evaluate(_MEASURE_JS, [k.value for k in keys])
        finally:
            await context.close()

        fragments = []
        for item in measured:
            if item is None:
                continue
            self._head = item["head"]
            fragments.append(Fragment(
                key=SectionKey(item["key"]),
                html=item["html"],
                bounds=Box(**item["bounds"]),
                links=[
                    LinkBox(href=link["href"] or "",
                            box=Box(link["x"], link["y"], link["width"], link["height"]))
                    for link in item["links"]
                ],
            ))
        logger.info(f"Measured {len(fragments)} of {len(keys)} flyer sections")
        return fragments

    async def rasterize(self, fragment: Fragment, scale: float = DEFAULT_SCALE,
                        background: str = DEFAULT_BACKGROUND) -> Bitmap:
        width = fragment.bounds.width or self.viewport_width
        document = _DOCUMENT.format(head=self._head, background=background,
                                    width=width, body=fragment.html)
        context, page = await self._new_page(scale)
        try:
            await page.set_content(document, wait_until="networkidle")
            locator = page.locator(SECTION_SELECTOR.format(key=fragment.key.value)).first
            png = await locator.screenshot(type="png", animations="disabled", omit_background=False)
        finally:
            await context.close()

        image = Image.open(BytesIO(png))
        image.load()
        return Bitmap(image=image, width=image.width, height=image.height, scale=scale)


async def fit_section(rasterizer: Rasterizer, section, geometry, scale: float = DEFAULT_SCALE,
                      background: str = DEFAULT_BACKGROUND) -> RasterizedSection:
    """Rasterize a section and clamp it to one page's content height.

    Oversized sections are rendered again from the source fragment at a
    reduced scale rather than resampled, so text stays sharp.
    """
    try:
        bitmap = await rasterizer.rasterize(section.fragment, scale, background)
        height = geometry.height_for(bitmap.width, bitmap.height)
        oversized = height > geometry.available_height

        if oversized:
            fit_scale = geometry.available_height / height
            logger.info(
                f"Section '{section.key.value}' is {height:.1f}pt tall; "
                f"re-rendering at scale {scale * fit_scale:.3f}"
            )
            bitmap = await rasterizer.rasterize(section.fragment, scale * fit_scale, background)
            height = geometry.available_height
    except RasterizationError:
        raise
    except Exception as e:
        raise RasterizationError(section.key, e) from e

    if bitmap.width <= 0 or bitmap.height <= 0:
        raise RasterizationError(section.key, f"empty bitmap {bitmap.width}x{bitmap.height}")

    width = geometry.printable_width
    scale_factor = geometry.scale_factor_for(bitmap.width)

    source = section.fragment.bounds
    if source.width > 0:
        link_scale_factor = width / source.width
    else:
        link_scale_factor = scale_factor * bitmap.scale
    # Clamped sections are squeezed vertically, so their links need their own y scale.
    link_scale_y = None
    if oversized and source.height > 0:
        link_scale_y = height / source.height

    return RasterizedSection(
        section=section,
        bitmap=bitmap,
        scale_factor=scale_factor,
        link_scale_factor=link_scale_factor,
        height=height,
        width=width,
        oversized=oversized,
        link_scale_y=link_scale_y,
    )
