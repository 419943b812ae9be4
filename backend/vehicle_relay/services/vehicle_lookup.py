"""Vehicle Lookup — validate → fetch → classify → map, for one request.

Invariants:
    - Invalid input raises before the registry client is touched
    - The registry client is called exactly once per request (its own
      timeout retries aside)
    - Failures surface as VehicleRelayError subclasses; nothing is swallowed
"""

import logging

from vehicle_relay.core.classify_upstream import to_error
from vehicle_relay.core.domain_types import UpstreamFailure
from vehicle_relay.core.map_vehicle import map_upstream_body
from vehicle_relay.core.validate_input import validate_registration_number
from vehicle_relay.infrastructure.registry_client import ResilientRegistryClient
from vehicle_relay.schemas.vehicle import VehicleInfoResponse

logger = logging.getLogger(__name__)


async def lookup_vehicle(
    raw_registration_number: str | None,
    registry: ResilientRegistryClient,
) -> VehicleInfoResponse:
    registration_number = validate_registration_number(raw_registration_number)

    result = await registry.lookup(registration_number)
    if isinstance(result, UpstreamFailure):
        logger.info(
            f"Registry lookup failed: {result.kind.value}",
            extra={"status_code": result.http_status},
        )
        raise to_error(result)

    return VehicleInfoResponse(vehicle_details=map_upstream_body(result.raw_body))
