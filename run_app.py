import asyncio
import logging
import socket
from contextlib import closing

import uvicorn

import cv_aligner.config as cfg
import cv_aligner.main as main_app

logger = logging.getLogger("cv_aligner.run_app")


def _port_is_free(host: str, port: int) -> bool:
	with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
		try:
			s.bind((host, port))
		except OSError:
			return False
	return True


def pick_port(host: str, preferred: int) -> int:
	if preferred and _port_is_free(host, preferred):
		return preferred
	with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
		s.bind((host, 0))
		port = s.getsockname()[1]
	logger.warning("port %d busy; using %d", preferred, port)
	return port


async def _serve(host: str, port: int) -> None:
	logger.info("serving %s at http://%s:%d (output_dir=%s)", cfg.APP_NAME, host, port, cfg.OUTPUT_DIR)
	server = uvicorn.Server(uvicorn.Config(app=main_app.app, host=host, port=port, log_level="info"))
	await server.serve()


def main() -> None:
	asyncio.run(_serve(cfg.HOST, pick_port(cfg.HOST, cfg.PORT)))


if __name__ == "__main__":
	main()
