import asyncio
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

import cv_aligner.config as cfg
from cv_aligner.routers.compose import router as compose_router
from cv_aligner.services.generator import cleanup_old_files

# Configure logging
logging.basicConfig(
	level=logging.INFO,
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CV Aligner", version=cfg.APP_VERSION)

# Serve generated documents for download
app.mount("/download", StaticFiles(directory=str(cfg.OUTPUT_DIR)), name="download")

_cleanup_task: Optional[asyncio.Task] = None


async def _cleanup_loop(interval_seconds: int) -> None:
	while True:
		await asyncio.sleep(interval_seconds)
		try:
			removed = await asyncio.to_thread(cleanup_old_files)
			logger.info("cleanup: removed=%d", removed)
		except Exception:
			logger.exception("cleanup_failed")


@app.on_event("startup")
async def on_startup():
	global _cleanup_task
	logger.info("App starting. version=%s", cfg.APP_VERSION)
	logger.info("logo_exists=%s path=%s", cfg.LOGO_PATH.exists(), cfg.LOGO_PATH)
	logger.info("output_dir=%s max_age_s=%d", cfg.OUTPUT_DIR, cfg.OUTPUT_MAX_AGE_SECONDS)
	if cfg.CLEANUP_INTERVAL_SECONDS > 0:
		_cleanup_task = asyncio.create_task(_cleanup_loop(cfg.CLEANUP_INTERVAL_SECONDS))


@app.on_event("shutdown")
async def on_shutdown():
	global _cleanup_task
	if _cleanup_task is not None:
		_cleanup_task.cancel()
		_cleanup_task = None


# API routes
app.include_router(compose_router, prefix="/api")
