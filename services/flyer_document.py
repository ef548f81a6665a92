"""Output document for dynamic flyers, built with fpdf2."""

import os
import logging
import tempfile
from dataclasses import dataclass, field

from fpdf import FPDF

from models.geometry import LETTER
from services.errors import SaveError

logger = logging.getLogger(__name__)


class FlyerPDF(FPDF):
    """Letter-size, point-unit PDF with no header, footer or automatic breaks."""

    def __init__(self, geometry=LETTER):
        super().__init__(orientation="P", unit="pt",
                         format=(geometry.page_width, geometry.page_height))
        self.set_auto_page_break(auto=False)
        self.set_margin(geometry.margin)
        self.set_creator("Fix & Flip Flyer")


@dataclass
class PageRecord:
    """What was drawn on one page, kept for inspection after assembly."""
    index: int
    placements: list = field(default_factory=list)
    links: list = field(default_factory=list)

    @property
    def content_height(self) -> float:
        return sum(p.height for p in self.placements)


class FlyerDocument:
    """Accumulates section images and link regions, then saves exactly once."""

    def __init__(self, geometry=LETTER, title: str = ""):
        self.geometry = geometry
        self.pdf = FlyerPDF(geometry)
        if title:
            self.pdf.set_title(title)
        self.pages: list[PageRecord] = []
        self.saved_path = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page_index(self) -> int:
        return len(self.pages) - 1

    def add_page(self) -> int:
        self._ensure_open()
        self.pdf.add_page()
        self.pages.append(PageRecord(index=len(self.pages)))
        return self.current_page_index

    def place_image(self, placement, bitmap):
        """Draw a section bitmap; pages are added until ``placement.page_index`` exists."""
        self._ensure_open()
        while self.current_page_index < placement.page_index:
            self.add_page()
        self.pdf.image(bitmap.image, x=placement.x, y=placement.y,
                       w=placement.width, h=placement.height)
        self.pages[placement.page_index].placements.append(placement)

    def add_link(self, region):
        """Invisible clickable overlay; the bitmap already shows the link styling."""
        self._ensure_open()
        self.pdf.link(region.x, region.y, region.width, region.height, region.href)
        self.pages[region.page_index].links.append(region)

    def save(self, filepath: str) -> str:
        """Write the finished PDF atomically. Can only be called once."""
        self._ensure_open()
        if not self.pages:
            logger.warning(f"No flyer sections had content; saving an empty document to {filepath}")
            self.pdf.add_page()

        directory = os.path.dirname(os.path.abspath(filepath))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(suffix=".pdf.part", dir=directory)
            with os.fdopen(fd, "wb") as fh:
                fh.write(self.pdf.output())
            os.replace(tmp_path, filepath)
        except Exception as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise SaveError(f"Could not write flyer to {filepath}: {e}") from e

        self.saved_path = filepath
        logger.info(f"Flyer PDF generated: {filepath} ({self.page_count} pages)")
        return filepath

    def summary(self) -> dict:
        return {
            "page_count": self.page_count,
            "pages": [
                {
                    "index": page.index,
                    "sections": [p.key.value for p in page.placements],
                    "content_height": round(page.content_height, 3),
                    "links": [
                        {"href": r.href, "x": r.x, "y": r.y, "width": r.width, "height": r.height}
                        for r in page.links
                    ],
                }
                for page in self.pages
            ],
            "saved_path": self.saved_path,
        }

    def _ensure_open(self):
        if self.saved_path is not None:
            raise SaveError(f"Flyer already saved to {self.saved_path}")
