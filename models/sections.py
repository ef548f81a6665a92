"""Data model for flyer sections moving through the pagination pipeline."""

from dataclasses import dataclass, field
from enum import Enum


class SectionKey(str, Enum):
    """Logical flyer sections. Values match the ``data-pdf-section`` markers."""
    PROPERTY = "property"
    FINANCIAL = "financial"
    PROPERTY_OVERVIEW = "propertyOverview"
    PROPERTY_DETAILS = "propertyDetails"
    COMPS = "comps"
    OCCUPANCY = "occupancy"
    ACCESS = "access"
    EXIT_STRATEGY = "exitStrategy"
    EMD_CLOSING = "emdClosing"
    CONTACT = "contact"


# Priority order for PDF generation
SECTION_ORDER = [
    SectionKey.PROPERTY,
    SectionKey.FINANCIAL,
    SectionKey.PROPERTY_OVERVIEW,
    SectionKey.PROPERTY_DETAILS,
    SectionKey.COMPS,
    SectionKey.OCCUPANCY,
    SectionKey.ACCESS,
    SectionKey.EXIT_STRATEGY,
    SectionKey.EMD_CLOSING,
    SectionKey.CONTACT,
]


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle, top-left origin."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class LinkBox:
    """An anchor found inside a fragment, measured in the fragment's space."""
    href: str
    box: Box


@dataclass
class Fragment:
    """A rendered section: markup snapshot plus measured geometry (CSS px)."""
    key: SectionKey
    html: str
    bounds: Box = field(default_factory=lambda: Box(0.0, 0.0, 0.0, 0.0))
    links: list[LinkBox] = field(default_factory=list)


@dataclass
class Section:
    key: SectionKey
    fragment: Fragment
    order: int = 0


@dataclass
class Bitmap:
    """Rasterized pixels of one section and the render scale that produced them."""
    image: object  # PIL.Image.Image
    width: int
    height: int
    scale: float


@dataclass
class RasterizedSection:
    section: Section
    bitmap: Bitmap
    scale_factor: float       # page units per bitmap pixel
    link_scale_factor: float  # page units per source (CSS) pixel
    height: float             # placed height in page units
    width: float = 0.0        # placed width in page units
    oversized: bool = False
    link_scale_y: float | None = None  # y scale for links when it differs from x


@dataclass(frozen=True)
class Placement:
    key: SectionKey
    page_index: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class LinkRegion:
    href: str
    x: float
    y: float
    width: float
    height: float
    page_index: int = 0


def build_sections(fragments) -> list[Section]:
    """Wrap fragments into sections, keeping the caller's order."""
    return [Section(key=frag.key, fragment=frag, order=i) for i, frag in enumerate(fragments)]
