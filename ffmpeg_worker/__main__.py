import logging

import uvicorn

from ffmpeg_worker.app import app
from ffmpeg_worker.core import config

logger = logging.getLogger("ffmpeg_worker")


def main():
    logger.info("ffmpeg-worker listening on :%s", config.PORT)
    uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_config=None)


if __name__ == "__main__":
    main()
