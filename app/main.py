"""
main.py
-------
Entry point: serves the booking API with uvicorn.
"""

import uvicorn

import config
from logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    logger.info(f"Starting Hotel Booking API on {config.API_HOST}:{config.API_PORT}")
    uvicorn.run("api_endpoints:app", host=config.API_HOST, port=config.API_PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
