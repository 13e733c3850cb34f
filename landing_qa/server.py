"""Serve a local site directory over HTTP for the duration of a run."""

from __future__ import annotations

import contextlib
import functools
import logging
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


@contextlib.contextmanager
def serve_directory(path: str | Path, host: str = "127.0.0.1", port: int = 0) -> Iterator[str]:
    """Serve ``path`` on a background thread and yield its base URL.

    Port 0 picks a free ephemeral port. The server is shut down on exit.
    """
    root = Path(path)
    if not root.is_dir():
        raise FileNotFoundError(f"Site directory not found: {root}")

    handler = functools.partial(_QuietHandler, directory=str(root.resolve()))
    server = ThreadingHTTPServer((host, port), handler)
    bound_host, bound_port = server.server_address[:2]
    url = f"http://{bound_host}:{bound_port}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    logger.info("Serving %s at %s", root, url)
    try:
        yield url
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
        logger.debug("Stopped serving %s", root)
