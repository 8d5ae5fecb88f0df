import logging

import uvicorn

from app.app import CONFIG, app
from telemetry import setup_logging, setup_telemetry


logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(CONFIG.log_level)
    if CONFIG.telemetry_enabled:
        setup_telemetry(
            app,
            service_name=CONFIG.service_name,
            service_version=CONFIG.service_version,
            endpoint=CONFIG.otlp_endpoint,
        )
    logger.info("Reading from backend at %s", CONFIG.backend_url)
    uvicorn.run(app, host=CONFIG.host, port=CONFIG.port, log_config=None)


if __name__ == "__main__":
    main()
