"""Dynamic flyer generation: measured sections in, one paginated PDF out."""

import os
import logging
from dataclasses import dataclass, field

from config import OUTPUT_DIR
from models.geometry import geometry_for
from models.property_data import _b
from models.sections import SECTION_ORDER, build_sections
from services.errors import FlyerGenerationError
from services.flyer_document import FlyerDocument
from services.paginator import Paginator
from services.rasterizer import DEFAULT_BACKGROUND, DEFAULT_SCALE, PlaywrightRasterizer

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "FixFlipDeal.pdf"


@dataclass
class FlyerOptions:
    file_name: str = DEFAULT_FILE_NAME
    background_color: str = DEFAULT_BACKGROUND
    canvas_scale: float = DEFAULT_SCALE
    margins: float = 40.0
    gap: float = 20.0
    enable_links: bool = True

    @classmethod
    def from_dict(cls, data: dict | None) -> "FlyerOptions":
        data = data or {}
        opts = cls()
        for name, key in (("file_name", "fileName"), ("background_color", "backgroundColor"),
                          ("canvas_scale", "canvasScale"), ("margins", "margins"),
                          ("gap", "gap"), ("enable_links", "enableLinks")):
            if key in data:
                setattr(opts, name, data[key])
            elif name in data:
                setattr(opts, name, data[name])
        opts.canvas_scale = float(opts.canvas_scale)
        opts.margins = float(opts.margins)
        opts.gap = float(opts.gap)
        opts.enable_links = _b(opts.enable_links)
        if opts.canvas_scale <= 0:
            raise ValueError(f"canvasScale must be positive, got {opts.canvas_scale}")
        return opts


@dataclass
class FlyerResult:
    path: str
    page_count: int
    placements: list = field(default_factory=list)
    link_regions: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    summary: dict = field(default_factory=dict)


async def generate_flyer(sections, data=None, rasterizer=None, options: FlyerOptions = None,
                         output_dir: str = OUTPUT_DIR, should_cancel=None) -> FlyerResult:
    """Paginate ``sections`` (in the given order) into a single PDF.

    Any failure is logged with its cause and re-raised as the generic
    ``FlyerGenerationError``; nothing is written unless every section succeeded.
    """
    options = options or FlyerOptions()
    geometry = geometry_for(options.margins, options.gap)
    filepath = os.path.join(output_dir, os.path.basename(options.file_name) or DEFAULT_FILE_NAME)

    try:
        document = FlyerDocument(geometry)
        paginator = Paginator(
            document, rasterizer, geometry,
            scale=options.canvas_scale,
            background=options.background_color,
            enable_links=options.enable_links,
            should_cancel=should_cancel,
        )
        await paginator.run(sections, data)
        document.save(filepath)
    except Exception as e:
        logger.exception(f"PDF generation failed: {e}")
        raise FlyerGenerationError() from e

    return FlyerResult(
        path=filepath,
        page_count=document.page_count,
        placements=paginator.placements,
        link_regions=paginator.link_regions,
        skipped=paginator.skipped,
        summary=document.summary(),
    )


async def generate_flyer_for_property(data, options: FlyerOptions = None,
                                      output_dir: str = OUTPUT_DIR,
                                      should_cancel=None) -> FlyerResult:
    """Render the flyer sections for ``data`` in a headless browser and paginate them."""
    from services.section_renderer import render_page

    options = options or FlyerOptions()
    try:
        page_html = render_page(data)
        async with PlaywrightRasterizer() as rasterizer:
            fragments = await rasterizer.measure(page_html, SECTION_ORDER)
            sections = build_sections(fragments)
            return await generate_flyer(sections, data, rasterizer, options,
                                        output_dir=output_dir, should_cancel=should_cancel)
    except FlyerGenerationError:
        raise
    except Exception as e:
        logger.exception(f"PDF generation failed while preparing sections: {e}")
        raise FlyerGenerationError() from e
