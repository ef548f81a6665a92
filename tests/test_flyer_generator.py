"""End-to-end tests for ``generate_flyer`` with a fake rasterizer.

Includes the reference scenario: an image-only header, a financial section
with two links and a comps section whose five categories are blank.
"""

from __future__ import annotations

import asyncio
import os
import typing as typ

import pytest

from models.property_data import PropertyData
from models.sections import SectionKey, build_sections
from services.errors import (
    USER_FACING_MESSAGE,
    FlyerGenerationError,
    GenerationCancelled,
    RasterizationError,
)
from services import section_renderer
from services.flyer_generator import FlyerOptions, generate_flyer, generate_flyer_for_property

from conftest import FakeRasterizer, make_fragment

if typ.TYPE_CHECKING:
    from pathlib import Path


def _scenario_sections():
    header = make_fragment(
        SectionKey.PROPERTY,
        html='<div data-pdf-section="property"><img src="https://photos.example/front.jpg"></div>',
        x=0.0, y=0.0, width=100.0, height=100.0,
    )
    financial = make_fragment(
        SectionKey.FINANCIAL,
        html='<div data-pdf-section="financial"><a href="https://deal.example/sheet">Deal sheet</a>'
             '<a href="https://deal.example/rehab">Rehab bid</a></div>',
        x=0.0, y=300.0, width=400.0, height=100.0,
        links=[
            ("https://deal.example/sheet", 10.0, 320.0, 120.0, 18.0),
            ("https://deal.example/rehab", 200.0, 350.0, 150.0, 18.0),
        ],
    )
    comps = make_fragment(
        SectionKey.COMPS,
        html='<div data-pdf-section="comps"><h2>Comparable Properties</h2></div>',
        x=0.0, y=400.0, width=400.0, height=60.0,
    )
    return build_sections([header, financial, comps])


def _scenario_data() -> PropertyData:
    return PropertyData(
        address="4529 Winona Court, Denver, CO",
        purchase_price=150000,
        rehab_estimate=50000,
        arv=300000,
        pending_comps=["", "  "],
        sold_comps=[""],
        rental_comps=[],
        new_construction_comps=["   "],
        as_is_comps=[],
    )


def test_reference_scenario(tmp_path: Path) -> None:
    rasterizer = FakeRasterizer()
    options = FlyerOptions(file_name="scenario.pdf", canvas_scale=2)
    result = asyncio.run(generate_flyer(_scenario_sections(), _scenario_data(), rasterizer,
                                        options, output_dir=str(tmp_path)))

    assert os.path.exists(result.path)
    assert result.path == str(tmp_path / "scenario.pdf")
    assert result.skipped == [SectionKey.COMPS]
    assert SectionKey.COMPS not in [key for key, _ in rasterizer.calls], "comps must never be rasterized"

    header, financial = result.placements
    assert result.page_count == 1
    assert (header.key, header.page_index, header.y, header.height) == (SectionKey.PROPERTY, 0, 40.0, 532.0)
    assert (financial.key, financial.page_index) == (SectionKey.FINANCIAL, 0)
    assert financial.y == 40.0 + 532.0 + 20.0
    assert financial.height == pytest.approx(133.0)

    assert len(result.link_regions) == 2
    scale = 532.0 / 400.0
    first, second = result.link_regions
    assert (first.x, first.y) == (pytest.approx(40.0 + 10.0 * scale), pytest.approx(592.0 + 20.0 * scale))
    assert (first.width, first.height) == (pytest.approx(120.0 * scale), pytest.approx(18.0 * scale))
    assert (second.x, second.y) == (pytest.approx(40.0 + 200.0 * scale), pytest.approx(592.0 + 50.0 * scale))
    assert all(r.page_index == financial.page_index for r in result.link_regions)


def test_generation_is_idempotent(tmp_path: Path) -> None:
    runs = []
    for name in ("first", "second"):
        out = tmp_path / name
        out.mkdir()
        result = asyncio.run(generate_flyer(_scenario_sections(), _scenario_data(), FakeRasterizer(),
                                            FlyerOptions(), output_dir=str(out)))
        summary = dict(result.summary)
        summary.pop("saved_path")
        runs.append(summary)
    assert runs[0] == runs[1]


def test_rasterization_failure_aborts_without_saving(tmp_path: Path) -> None:
    rasterizer = FakeRasterizer(fail_on={SectionKey.FINANCIAL})
    with pytest.raises(FlyerGenerationError, match=USER_FACING_MESSAGE) as excinfo:
        asyncio.run(generate_flyer(_scenario_sections(), _scenario_data(), rasterizer,
                                   FlyerOptions(file_name="broken.pdf"), output_dir=str(tmp_path)))

    assert isinstance(excinfo.value.__cause__, RasterizationError)
    assert excinfo.value.__cause__.key == SectionKey.FINANCIAL
    assert os.listdir(tmp_path) == [], "no partial document may be written"


def test_all_empty_sections_still_produce_a_document(tmp_path: Path) -> None:
    sections = build_sections([
        make_fragment(SectionKey.OCCUPANCY, html="<div> </div>"),
        make_fragment(SectionKey.ACCESS, html="<div>N/A</div>"),
    ])
    result = asyncio.run(generate_flyer(sections, None, FakeRasterizer(), FlyerOptions(),
                                        output_dir=str(tmp_path)))
    assert result.page_count == 0
    assert result.placements == []
    assert os.path.exists(result.path)


def test_cancellation_between_sections(tmp_path: Path) -> None:
    with pytest.raises(FlyerGenerationError) as excinfo:
        asyncio.run(generate_flyer(_scenario_sections(), _scenario_data(), FakeRasterizer(),
                                   FlyerOptions(), output_dir=str(tmp_path),
                                   should_cancel=lambda: True))
    assert isinstance(excinfo.value.__cause__, GenerationCancelled)
    assert os.listdir(tmp_path) == []


def test_options_from_camel_case_payload() -> None:
    options = FlyerOptions.from_dict({
        "fileName": "deal.pdf",
        "backgroundColor": "#f0f0f0",
        "canvasScale": "3",
        "margins": 36,
        "gap": "10",
        "enableLinks": False,
    })
    assert options == FlyerOptions("deal.pdf", "#f0f0f0", 3.0, 36.0, 10.0, False)


def test_options_defaults() -> None:
    options = FlyerOptions.from_dict(None)
    assert options.file_name == "FixFlipDeal.pdf"
    assert options.background_color == "#ffffff"
    assert (options.canvas_scale, options.margins, options.gap, options.enable_links) == (2.0, 40.0, 20.0, True)


def test_options_reject_non_positive_scale() -> None:
    with pytest.raises(ValueError, match="canvasScale"):
        FlyerOptions.from_dict({"canvasScale": 0})


@pytest.mark.parametrize(("raw", "expected"), [("false", False), ("0", False), ("true", True), (True, True)])
def test_options_parse_enable_links_strings(raw, expected) -> None:
    assert FlyerOptions.from_dict({"enableLinks": raw}).enable_links is expected


def test_template_failure_surfaces_as_generation_error(tmp_path: Path, monkeypatch) -> None:
    def broken_render(data):
        raise KeyError("missing template variable")

    monkeypatch.setattr(section_renderer, "render_page", broken_render)
    with pytest.raises(FlyerGenerationError, match=USER_FACING_MESSAGE) as excinfo:
        asyncio.run(generate_flyer_for_property(_scenario_data(), output_dir=str(tmp_path)))
    assert isinstance(excinfo.value.__cause__, KeyError)
    assert os.listdir(tmp_path) == []
