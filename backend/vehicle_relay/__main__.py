"""Run the relay with uvicorn: `python -m vehicle_relay` (binds HOST:PORT)."""

import uvicorn

from vehicle_relay.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "vehicle_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
