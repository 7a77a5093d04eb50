# ===== Part 1: Imports & Logging ============================================
import argparse
import logging

import uvicorn
from fastapi import FastAPI

from modules.tally import get_service
from modules.tally.api import router as tally_router
from utils.app_settings import load_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ===== Part 2: Application factory ==========================================
def create_app() -> FastAPI:
    app = FastAPI(title="ECUES Tally")
    app.include_router(tally_router)
    return app


# ===== Part 3: Entry point ==================================================
def parse_args(argv=None) -> argparse.Namespace:
    settings = load_settings()
    p = argparse.ArgumentParser(description="ECUES on-scene patient tally")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--log-level", default=settings.log_level)
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    service = get_service()
    logger.info(
        "Tally session ready (catalog: %d hospitals, output: %s)",
        len(service.catalog.hospitals),
        service.settings.output_dir,
    )

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
