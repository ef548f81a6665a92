"""Shared fixtures for the flyer test suite.

``FakeRasterizer`` stands in for headless Chromium: it turns a fragment's
measured CSS box into a solid Pillow bitmap of ``round(size * scale)``
pixels, which makes every pagination decision deterministic.
"""

from __future__ import annotations

import pytest
from PIL import Image

from models.sections import Bitmap, Box, Fragment, LinkBox, RasterizedSection, Section, SectionKey


class FakeRasterizer:
    """Records every rasterize call as ``(key, scale)``."""

    def __init__(self, fail_on=()):
        self.calls: list[tuple[SectionKey, float]] = []
        self.fail_on = set(fail_on)

    async def rasterize(self, fragment, scale, background="#ffffff"):
        self.calls.append((fragment.key, scale))
        if fragment.key in self.fail_on:
            raise RuntimeError(f"render failed for {fragment.key.value}")
        width = max(1, round(fragment.bounds.width * scale))
        height = max(1, round(fragment.bounds.height * scale))
        image = Image.new("RGB", (width, height), background)
        return Bitmap(image=image, width=width, height=height, scale=scale)


def make_fragment(key, html="<div>content</div>", width=400.0, height=100.0,
                  x=0.0, y=0.0, links=()) -> Fragment:
    """Fragment whose anchors are given as ``(href, x, y, w, h)`` in page pixels."""
    return Fragment(
        key=key,
        html=html,
        bounds=Box(x, y, width, height),
        links=[LinkBox(href, Box(lx, ly, lw, lh)) for href, lx, ly, lw, lh in links],
    )


def make_section(key, order=0, **kwargs) -> Section:
    return Section(key=key, fragment=make_fragment(key, **kwargs), order=order)


def make_rasterized(key, height, oversized=False, width=532.0) -> RasterizedSection:
    return RasterizedSection(
        section=Section(key=key, fragment=Fragment(key=key, html="")),
        bitmap=None,
        scale_factor=1.0,
        link_scale_factor=1.0,
        height=height,
        width=width,
        oversized=oversized,
    )


@pytest.fixture
def rasterizer() -> FakeRasterizer:
    return FakeRasterizer()
