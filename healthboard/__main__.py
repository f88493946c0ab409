import logging

import uvicorn

from healthboard.config import settings

logger = logging.getLogger("healthboard")


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "healthboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
