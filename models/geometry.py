"""Physical page geometry for flyer PDFs (all values in points)."""

from dataclasses import dataclass

LETTER_WIDTH = 612.0
LETTER_HEIGHT = 792.0
DEFAULT_MARGIN = 40.0
DEFAULT_GAP = 20.0


@dataclass(frozen=True)
class PageGeometry:
    """Page size, uniform margin and the gap left between stacked sections."""
    page_width: float = LETTER_WIDTH
    page_height: float = LETTER_HEIGHT
    margin: float = DEFAULT_MARGIN
    gap: float = DEFAULT_GAP

    @property
    def printable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def available_height(self) -> float:
        """Height an oversized section is clamped to.

        A section of this height placed at the top margin ends exactly on
        the bottom boundary.
        """
        return self.page_height - 2 * self.margin

    @property
    def bottom_boundary(self) -> float:
        return self.page_height - self.margin

    @property
    def content_left(self) -> float:
        return self.margin

    @property
    def content_top(self) -> float:
        return self.margin

    def scale_factor_for(self, bitmap_width: int) -> float:
        """Page units per bitmap pixel when a bitmap spans the printable width."""
        if bitmap_width <= 0:
            raise ValueError(f"Bitmap width must be positive, got {bitmap_width}")
        return self.printable_width / bitmap_width

    def height_for(self, bitmap_width: int, bitmap_height: int) -> float:
        """Placed height of a bitmap stretched across the printable width."""
        return bitmap_height * self.scale_factor_for(bitmap_width)


LETTER = PageGeometry()


def geometry_for(margins: float = DEFAULT_MARGIN, gap: float = DEFAULT_GAP) -> PageGeometry:
    """US Letter geometry with caller-supplied margins and gap."""
    return PageGeometry(margin=float(margins), gap=float(gap))
