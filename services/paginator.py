"""Place rasterized flyer sections onto fixed-size pages.

Sections are atomic: each one is drawn as a single image on a single page,
in the order the caller supplied. The page cursor is an explicit value that
``plan_placement`` takes and returns, so break decisions can be exercised
without a browser or a PDF.
"""

import asyncio
import logging
from dataclasses import dataclass, replace

from models.sections import Placement
from services.emptiness import is_section_empty
from services.errors import GenerationCancelled
from services.links import project_section_links
from services.rasterizer import DEFAULT_BACKGROUND, DEFAULT_SCALE, fit_section

logger = logging.getLogger(__name__)

# Tolerance for float noise when a section lands exactly on the bottom boundary
_EPSILON = 1e-6


@dataclass(frozen=True)
class PageCursor:
    page_index: int
    y: float
    placed: int = 0

    @property
    def is_first(self) -> bool:
        return self.placed == 0


def start_cursor(geometry) -> PageCursor:
    return PageCursor(page_index=0, y=geometry.content_top, placed=0)


def needs_page_break(cursor: PageCursor, rasterized, geometry) -> bool:
    """Whether ``rasterized`` must start a new page instead of following the cursor."""
    if cursor.is_first:
        return False
    if rasterized.oversized:
        # A clamped section only fits from the top margin.
        return cursor.y > geometry.content_top + _EPSILON
    return cursor.y + rasterized.height > geometry.bottom_boundary + _EPSILON


def plan_placement(cursor: PageCursor, rasterized, geometry) -> tuple[Placement, PageCursor]:
    """Decide where ``rasterized`` goes and return the cursor for the next section."""
    if needs_page_break(cursor, rasterized, geometry):
        cursor = replace(cursor, page_index=cursor.page_index + 1, y=geometry.content_top)

    placement = Placement(
        key=rasterized.section.key,
        page_index=cursor.page_index,
        x=geometry.content_left,
        y=cursor.y,
        width=geometry.printable_width,
        height=rasterized.height,
    )
    next_cursor = replace(
        cursor,
        y=cursor.y + rasterized.height + geometry.gap,
        placed=cursor.placed + 1,
    )
    return placement, next_cursor


class Paginator:
    """Walks sections one at a time: classify, rasterize, place, link."""

    def __init__(self, document, rasterizer, geometry, scale: float = DEFAULT_SCALE,
                 background: str = DEFAULT_BACKGROUND, enable_links: bool = True,
                 should_cancel=None):
        self.document = document
        self.rasterizer = rasterizer
        self.geometry = geometry
        self.scale = scale
        self.background = background
        self.enable_links = enable_links
        self.should_cancel = should_cancel
        self.placements: list[Placement] = []
        self.link_regions = []
        self.skipped = []

    async def run(self, sections, data=None) -> list[Placement]:
        cursor = start_cursor(self.geometry)

        for section in sections:
            if self.should_cancel is not None and self.should_cancel():
                raise GenerationCancelled(f"Cancelled before section '{section.key.value}'")

            if is_section_empty(section.fragment, section.key, data):
                logger.info(f"Skipping empty section '{section.key.value}'")
                self.skipped.append(section.key)
                continue

            rasterized = await fit_section(self.rasterizer, section, self.geometry,
                                           self.scale, self.background)
            placement, cursor = plan_placement(cursor, rasterized, self.geometry)
            self.document.place_image(placement, rasterized.bitmap)
            self.placements.append(placement)
            logger.info(
                f"Placed '{section.key.value}' on page {placement.page_index + 1} "
                f"at y={placement.y:.1f}pt, height={placement.height:.1f}pt"
            )

            if self.enable_links:
                for region in project_section_links(section.fragment, placement,
                                                    rasterized.link_scale_factor,
                                                    rasterized.link_scale_y):
                    self.document.add_link(region)
                    self.link_regions.append(region)

            # Yield point: lets other tasks on the event loop run between sections.
            await asyncio.sleep(0)

        return self.placements
