"""Tests for deal sheet parsing, deal math and formatting helpers."""

from __future__ import annotations

import pytest

from models.property_data import (
    PropertyData,
    address_slug,
    calculate_financials,
    city_from_address,
    format_currency,
    format_number,
    from_dict,
    generate_titles,
    has_comps,
)


def test_from_dict_accepts_camel_case_form_values() -> None:
    data = from_dict({
        "address": "123 Main St, Denver, CO",
        "purchasePrice": "$150,000",
        "rehabEstimate": "50000",
        "arv": "300,000",
        "yearBuilt": "1998",
        "memoFiled": "on",
        "pendingComps": "https://comps.example/1\nhttps://comps.example/2",
        "contactPhone": 5551234567,
    })
    assert data.purchase_price == 150000.0
    assert data.rehab_estimate == 50000.0
    assert data.arv == 300000.0
    assert data.year_built == 1998
    assert data.memo_filed is True
    assert data.pending_comps == ["https://comps.example/1", "https://comps.example/2"]
    assert data.contact_phone == "5551234567"


def test_from_dict_snake_case_and_bad_numbers() -> None:
    data = from_dict({"purchase_price": "not a number", "sold_comps": ["a", None], "beds": ""})
    assert data.purchase_price == 0.0
    assert data.beds == 0.0
    assert data.sold_comps == ["a", ""]


def test_from_dict_none_gives_defaults() -> None:
    assert from_dict(None) == PropertyData()


def test_calculate_financials() -> None:
    fin = calculate_financials(150000, 50000, 300000)
    assert fin == {
        "total_investment": 200000,
        "gross_profit": 100000,
        "selling_cost_amount": 24000,
        "net_profit": 76000,
    }


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1234, "$1,234"), (0, "$0"), (None, "$0"), (-2500.4, "-$2,500"), (999.6, "$1,000")],
)
def test_format_currency(value, expected) -> None:
    assert format_currency(value) == expected


def test_format_number() -> None:
    assert format_number(1450.0) == "1,450"
    assert format_number(2.5) == "2.5"
    assert format_number(None) == "0"


def test_city_and_titles() -> None:
    assert city_from_address("123 Main St, Denver, CO") == "Denver"
    assert city_from_address("123 Main St") == "Prime Location"
    data = PropertyData(address="123 Main St, Denver, CO", purchase_price=150000,
                        rehab_estimate=50000, arv=300000)
    assert generate_titles(data) == {
        "title": "Denver Fix & Flip - $100,000 Profit Potential",
        "subtitle": "Investment Property Analysis",
    }


def test_address_slug() -> None:
    assert address_slug("123 Main St, Denver, CO") == "123-main-st-denver-co"
    assert address_slug("  #4 / Unit B  ") == "4-unit-b"
    assert address_slug("") == ""
    assert PropertyData(address="9 Elm Ave").slug == "9-elm-ave"


def test_has_comps_ignores_blank_entries() -> None:
    assert not has_comps(PropertyData(pending_comps=["", "   "]))
    assert has_comps(PropertyData(as_is_comps=["", "https://comps.example/9"]))
