import re
from dataclasses import dataclass, field, fields, asdict

COMP_CATEGORIES = (
    "pending_comps",
    "sold_comps",
    "rental_comps",
    "new_construction_comps",
    "as_is_comps",
)

DEFAULT_SELLING_COSTS_PCT = 8.0


@dataclass
class PropertyData:
    """Property deal sheet, exactly what the wholesaler fills in."""
    address: str = ""
    beds: float = 0.0
    baths: float = 0.0
    sqft: float = 0.0
    year_built: int = 0
    lot_size: float = 0.0
    zoning: str = ""
    # Financials
    purchase_price: float = 0.0
    rehab_estimate: float = 0.0
    arv: float = 0.0
    selling_costs: float = DEFAULT_SELLING_COSTS_PCT  # % of ARV
    # Systems
    roof_age: str = ""
    roof_condition: str = ""
    roof_notes: str = ""
    hvac_age: str = ""
    hvac_condition: str = ""
    hvac_notes: str = ""
    water_heater_age: str = ""
    water_heater_condition: str = ""
    water_heater_notes: str = ""
    siding_type: str = ""
    siding_condition: str = ""
    siding_notes: str = ""
    additional_notes: str = ""
    # Comps (one URL or description per entry)
    pending_comps: list[str] = field(default_factory=list)
    sold_comps: list[str] = field(default_factory=list)
    rental_comps: list[str] = field(default_factory=list)
    new_construction_comps: list[str] = field(default_factory=list)
    as_is_comps: list[str] = field(default_factory=list)
    # Occupancy & access
    occupancy: str = ""
    lease_terms: str = ""
    access: str = ""
    lockbox_code: str = ""
    # Contact
    contact_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    business_hours: str = ""
    # EMD & closing
    emd_amount: float = 0.0
    emd_due_date: str = ""
    memo_filed: bool = False
    closing_date: str = ""
    # Links & exit
    photo_link: str = ""
    exit_strategy: str = ""
    rental_backup: bool = False
    rental_backup_details: str = ""

    @property
    def slug(self) -> str:
        return address_slug(self.address)

    def to_dict(self) -> dict:
        return asdict(self)


def _f(val, default=0.0):
    """Parse float from form."""
    try:
        if isinstance(val, str):
            val = val.replace(",", "").replace("$", "").strip()
        return float(val) if val else default
    except (ValueError, TypeError):
        return default


def _i(val, default=0):
    """Parse int from form."""
    try:
        return int(float(val)) if val else default
    except (ValueError, TypeError):
        return default


def _b(val):
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "on", "yes")
    return bool(val)


def _s(val):
    return "" if val is None else str(val)


def _list(val):
    if not val:
        return []
    if isinstance(val, str):
        return [line for line in val.splitlines()]
    return [_s(v) for v in val]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_PARSERS = {
    float: _f,
    int: _i,
    bool: _b,
    str: _s,
}


def from_dict(data: dict) -> PropertyData:
    """Parse a JSON/form payload (camelCase or snake_case keys) into PropertyData."""
    data = data or {}
    kwargs = {}
    for f in fields(PropertyData):
        if f.name in data:
            raw = data[f.name]
        elif _camel(f.name) in data:
            raw = data[_camel(f.name)]
        else:
            continue
        if f.name in COMP_CATEGORIES:
            kwargs[f.name] = _list(raw)
        else:
            parser = _PARSERS.get(type(f.default), _s)
            kwargs[f.name] = parser(raw)
    return PropertyData(**kwargs)


def calculate_financials(purchase_price: float, rehab_estimate: float, arv: float,
                         selling_costs: float = DEFAULT_SELLING_COSTS_PCT) -> dict:
    """Fix & flip deal math."""
    total_investment = purchase_price + rehab_estimate
    gross_profit = arv - total_investment
    selling_cost_amount = round(arv * (selling_costs / 100))
    net_profit = gross_profit - selling_cost_amount
    return {
        "total_investment": total_investment,
        "gross_profit": gross_profit,
        "selling_cost_amount": selling_cost_amount,
        "net_profit": net_profit,
    }


def format_currency(value) -> str:
    """$1,234 style, no cents."""
    value = value or 0
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_number(value) -> str:
    value = value or 0
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def city_from_address(address: str, default: str = "Prime Location") -> str:
    parts = [p.strip() for p in (address or "").split(",")]
    if len(parts) >= 2 and parts[1]:
        return parts[1]
    return default


def generate_titles(data: PropertyData) -> dict:
    """Headline and subtitle for the flyer header."""
    fin = calculate_financials(data.purchase_price, data.rehab_estimate, data.arv,
                               DEFAULT_SELLING_COSTS_PCT)
    city = city_from_address(data.address)
    return {
        "title": f"{city} Fix & Flip - {format_currency(fin['gross_profit'])} Profit Potential",
        "subtitle": "Investment Property Analysis",
    }


def address_slug(address: str) -> str:
    """'123 Main St, Denver, CO' -> '123-main-st-denver-co'."""
    slug = re.sub(r"[^a-z0-9]+", "-", (address or "").lower())
    return slug.strip("-")


def has_comps(data: PropertyData) -> bool:
    return any(
        (entry or "").strip()
        for category in COMP_CATEGORIES
        for entry in getattr(data, category)
    )
