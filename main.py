import logging, coloredlogs
import os
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from getset.config import load_config, resolve_config
from getset.errors import FatalError, StaticMountError
from getset.service import CommandService
from getset.storage import IniConfigStore
from app.http_api import mount_command_api

logger = logging.getLogger("MAIN")

# config.txt and www/ live next to this file unless configured otherwise
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def setup_logging(level: str = "INFO"):
    logging.basicConfig(level=level)
    coloredlogs.install(
        level=level, fmt="%(asctime)s  | %(name)s | %(levelname)s # %(message)s"
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(cfg: Optional[dict] = None) -> FastAPI:
    """Build the application. Raises FatalError if the store or web root is unusable."""
    if cfg is None:
        cfg = load_config(os.getenv("CONFIG_PATH"), BASE_DIR)
        setup_logging(cfg["log_level"])
    else:
        cfg = resolve_config(cfg, BASE_DIR)

    store = IniConfigStore(cfg["config_path"], cfg["section"])
    service = CommandService(store).initialize()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Serving {cfg['config_path']}")
        yield
        await service.shutdown()

    app = FastAPI(title="getset", lifespan=lifespan)
    app.state.service = service

    mount_command_api(app, service)

    # Everything not routed above comes from the web root
    try:
        app.mount("/", StaticFiles(directory=cfg["www_path"]), name="www")
    except RuntimeError as e:
        raise StaticMountError(f"Static mount failed: {e}") from e
    return app


def main():
    cfg = load_config(os.getenv("CONFIG_PATH"), BASE_DIR)
    setup_logging(cfg["log_level"])
    try:
        app = create_app(cfg)
    except FatalError as e:
        logger.error(str(e))
        sys.exit(e.exit_code)
    uvicorn.run(app, host=cfg["host"], port=cfg["port"], log_config=None)


if __name__ == "__main__":
    main()

# Example:
# CONFIG_PATH=configs/getset.yaml python main.py
# CONFIG_PATH=configs/getset.yaml uvicorn main:create_app --factory --port 8081
