"""Vehicle Mapping — upstream registry JSON to the canonical VehicleDetails.

Invariants:
    - Body that is not JSON, or not a JSON object, raises
      MalformedUpstreamResponseError (raw excerpt capped at 500 chars)
    - Every canonical field is filled; a miss becomes "N/A"
    - Fallback keys are tried in order, each with the full three-tier lookup
    - registration_date and insurance_valid_upto go through normalize_date()
"""

from vehicle_relay.core.domain_types import NOT_AVAILABLE
from vehicle_relay.core.errors import MalformedUpstreamResponseError
from vehicle_relay.core.format_dates import normalize_date
from vehicle_relay.core.json_tree import JsonKind, kind_of, lookup, parse_json
from vehicle_relay.schemas.vehicle import VehicleDetails

# canonical field -> upstream keys in fallback order (mParivahan uses rc_ prefix)
FIELD_SOURCES: dict[str, tuple[str, ...]] = {
    "model": ("rc_maker_model",),
    "fuel_type": ("rc_fuel_desc",),
    "manufacturer": ("rc_maker_desc",),
    "rto": ("rc_registered_at", "rc_rto_code"),
    "registration_date": ("rc_regn_dt",),
    "insurance_valid_upto": ("rc_insurance_upto",),
    "insurance_company": ("rc_insurance_comp",),
    "owner_name": ("rc_owner_name",),
    "seat_capacity": ("rc_seat_cap",),
    "vehicle_category": ("rc_vch_catg",),
    "vehicle_class": ("rc_vh_class_desc",),
    "manufacturing_year": ("rc_manu_month_yr",),
    "cubic_capacity": ("rc_cubic_cap",),
    "fitness_upto": ("rc_fit_upto",),
    "insurance_policy_no": ("rc_insurance_policy_no",),
    "state_code": ("rc_state_code",),
}

DATE_FIELDS = frozenset({"registration_date", "insurance_valid_upto"})


def parse_upstream_body(raw_body: str) -> dict:
    """Parse the upstream body into an object tree or raise."""
    try:
        tree = parse_json(raw_body)
    except ValueError as e:
        raise MalformedUpstreamResponseError(str(e), raw_body) from e
    if kind_of(tree) is not JsonKind.OBJECT:
        raise MalformedUpstreamResponseError(
            f"expected a JSON object, got {kind_of(tree).value}", raw_body,
        )
    return tree


def extract_field(tree: dict, upstream_keys: tuple[str, ...]) -> str | None:
    for key in upstream_keys:
        value = lookup(tree, key)
        if value is not None:
            return value
    return None


def map_vehicle_details(tree: dict) -> VehicleDetails:
    """Build VehicleDetails from a parsed upstream object."""
    fields: dict[str, str] = {}
    for name, upstream_keys in FIELD_SOURCES.items():
        value = extract_field(tree, upstream_keys)
        if name in DATE_FIELDS:
            value = normalize_date(value)
        fields[name] = value if value is not None else NOT_AVAILABLE
    return VehicleDetails(**fields)


def map_upstream_body(raw_body: str) -> VehicleDetails:
    return map_vehicle_details(parse_upstream_body(raw_body))
