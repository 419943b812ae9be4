"""Vehicle Schemas — canonical output shape returned to the frontend.

Invariants:
    - Every VehicleDetails field is always present and always a string
    - Missing or unparseable upstream data renders as "N/A", never as null
"""

from pydantic import BaseModel

from vehicle_relay.core.domain_types import NOT_AVAILABLE


class VehicleDetails(BaseModel):
    """Canonical vehicle record, independent of upstream key naming."""
    model: str = NOT_AVAILABLE
    fuel_type: str = NOT_AVAILABLE
    manufacturer: str = NOT_AVAILABLE
    rto: str = NOT_AVAILABLE
    registration_date: str = NOT_AVAILABLE
    insurance_valid_upto: str = NOT_AVAILABLE
    insurance_company: str = NOT_AVAILABLE
    owner_name: str = NOT_AVAILABLE
    seat_capacity: str = NOT_AVAILABLE
    vehicle_category: str = NOT_AVAILABLE
    vehicle_class: str = NOT_AVAILABLE
    manufacturing_year: str = NOT_AVAILABLE
    cubic_capacity: str = NOT_AVAILABLE
    fitness_upto: str = NOT_AVAILABLE
    insurance_policy_no: str = NOT_AVAILABLE
    state_code: str = NOT_AVAILABLE


class VehicleInfoResponse(BaseModel):
    """Envelope for GET /api/vehicleinfo."""
    vehicle_details: VehicleDetails
