"""Vehicle Info — GET /api/vehicleinfo?regno=<registration number>.

Invariants:
    - regno is optional at the FastAPI layer so a missing value reaches the
      validator and yields 400 {"error": ...}, not a 422 validation envelope
    - Success returns {"vehicle_details": {...}} with every canonical field
"""

from fastapi import APIRouter, Depends, Query

from vehicle_relay.infrastructure.registry_client import (
    ResilientRegistryClient, get_registry_client,
)
from vehicle_relay.schemas.vehicle import VehicleInfoResponse
from vehicle_relay.services.vehicle_lookup import lookup_vehicle

router = APIRouter(prefix="/api", tags=["vehicles"])


@router.get(
    "/vehicleinfo",
    response_model=VehicleInfoResponse,
    name="GetVehicleInfo",
)
async def get_vehicle_info(
    regno: str | None = Query(None, description="Vehicle registration number"),
    registry: ResilientRegistryClient = Depends(get_registry_client),
):
    return await lookup_vehicle(regno, registry)
