from datetime import datetime, timezone
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse, Response

import cv_aligner.config as cfg
from cv_aligner.exceptions import SerializationError, ValidationError
from cv_aligner.models.schema import parse_resume
from cv_aligner.services.assets import load_logo
from cv_aligner.services.composer import compose
from cv_aligner.services.generator import derive_filename, generate_cv
from cv_aligner.services.styles import load_house_style

logger = logging.getLogger(__name__)

router = APIRouter()


def _validated(payload: Dict[str, Any]):
	try:
		return parse_resume(payload)
	except ValidationError as e:
		logger.info("validation_failed fields=%s", ",".join(e.fields))
		raise HTTPException(status_code=422, detail=str(e))


@router.get("/health")
def health():
	return {
		"status": "ok",
		"version": cfg.APP_VERSION,
		"timestamp": datetime.now(timezone.utc).isoformat(),
		"logoAvailable": load_logo() is not None,
	}


@router.post("/compose")
def compose_resume(payload: Dict[str, Any] = Body(...)):
	"""Return the rendered .docx directly as the response body."""
	resume = _validated(payload)
	try:
		data = compose(resume, style=load_house_style())
	except SerializationError as e:
		logger.exception("compose_failed")
		raise HTTPException(status_code=500, detail=f"Render failed: {e}")
	filename = derive_filename(resume.name)
	logger.info("compose: served filename=%s bytes=%d", filename, len(data))
	return Response(
		content=data,
		media_type=cfg.DOCX_MEDIA_TYPE,
		headers={"Content-Disposition": f'attachment; filename="{filename}"'},
	)


@router.post("/generate")
def generate_resume(payload: Dict[str, Any] = Body(...)):
	"""Write the rendered .docx into the output directory and return a download link."""
	start = datetime.now(timezone.utc)
	resume = _validated(payload)
	try:
		path = generate_cv(resume, output_dir=cfg.OUTPUT_DIR, style=load_house_style())
	except SerializationError as e:
		logger.exception("generate_failed")
		raise HTTPException(status_code=500, detail=f"Render failed: {e}")
	except OSError as e:
		logger.exception("generate_write_failed")
		raise HTTPException(status_code=500, detail=f"Could not write document: {e}")
	duration_ms = int((datetime.now(timezone.utc) - start).total_seconds() * 1000)
	logger.info("generate: complete filename=%s duration_ms=%d", path.name, duration_ms)
	return JSONResponse({
		"success": True,
		"candidateName": resume.name,
		"filename": path.name,
		"downloadUrl": f"/download/{path.name}",
	})
