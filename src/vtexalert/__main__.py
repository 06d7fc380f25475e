"""Run the service: ``python -m vtexalert`` (listens on PORT, default 3000)."""

import uvicorn

from vtexalert.api.factory import create_app
from vtexalert.config import load_settings
from vtexalert.observability.logging import get_logger

logger = get_logger(__name__)


def main() -> None:
    settings = load_settings()
    logger.info(
        "starting vtex alert service",
        extra={
            "extra_fields": {
                "port": settings.port,
                "vtex_configured": settings.vtex is not None,
                "database_configured": settings.database_url is not None,
                "blip_configured": settings.blip.is_configured,
            }
        },
    )
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
