import logging

import uvicorn
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings
from app.core.logging import configure_logging
from . import app

configure_logging()
logger = logging.getLogger("app")
Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


def run() -> None:
    logger.info(
        "server.starting",
        extra={"extra_data": {"url": f"http://localhost:{settings.PORT}", "data_dir": str(settings.DATA_DIR)}},
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
