"""Map anchors inside a rasterized section to clickable regions on its page."""

from models.sections import LinkRegion


def project_link(link, section_bounds, placement_x: float, placement_y: float,
                 scale: float, page_index: int = 0, scale_y: float = None) -> LinkRegion:
    """Project one measured anchor onto page coordinates.

    ``scale`` is page units per source pixel, i.e. the unit the anchor and
    section boxes were measured in. ``scale_y`` overrides it vertically for
    sections drawn at a different aspect ratio than they were measured.
    """
    if scale_y is None:
        scale_y = scale
    rel_x = link.box.x - section_bounds.x
    rel_y = link.box.y - section_bounds.y
    return LinkRegion(
        href=link.href,
        x=placement_x + rel_x * scale,
        y=placement_y + rel_y * scale_y,
        width=link.box.width * scale,
        height=link.box.height * scale_y,
        page_index=page_index,
    )


def project_section_links(fragment, placement, scale: float, scale_y: float = None) -> list[LinkRegion]:
    """Regions for every anchor of ``fragment``, in document order."""
    regions = []
    for link in fragment.links:
        if not (link.href or "").strip():
            continue
        regions.append(project_link(link, fragment.bounds, placement.x, placement.y,
                                    scale, placement.page_index, scale_y))
    return regions
