"""HTTP API for reading and saving JSONL files under the configured root.

Endpoints:
    GET  /api/config             - Root path description
    GET  /api/files              - JSONL files available for editing
    GET  /api/files/{filename}   - Raw file content
    POST /api/files/{filename}   - Save content (with optional backup)

The browser editor is served from ``/`` and ``/static``.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from . import __version__
from .config import EditorConfig
from .errors import EditorError, UnconfiguredError
from .files import FileAccess

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


class SaveRequest(BaseModel):
    content: str


def _files(request: Request) -> FileAccess:
    return request.app.state.files


def _count_lines(content: str) -> int:
    return content.count("\n")


def create_app(config: Optional[EditorConfig] = None) -> FastAPI:
    """Build the API app around an immutable configuration."""
    config = config or EditorConfig()

    app = FastAPI(
        title="JSONL Editor",
        description="Claude Code JSONL conversation editor",
        version=__version__,
    )
    app.state.config = config
    app.state.files = FileAccess(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EditorError)
    async def editor_error_handler(request: Request, exc: EditorError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Request body must be {\"content\": string}"})

    # ── API ──────────────────────────────────────────────────────────────────

    @app.get("/api/config")
    def get_config(request: Request):
        logger.info("GET /api/config - Client requesting configuration")
        files = _files(request)
        if not files.config.is_configured:
            logger.warning("Config requested but no --jsonl-path specified")
            return {"error": UnconfiguredError().message}

        info = files.resolve_target()
        payload = {"jsonlPath": str(files.root), "isDirectory": info.is_directory}
        if info.is_directory:
            payload["files"] = [f.to_dict() for f in info.files]
        else:
            payload["filePath"] = str(info.file_path)
        logger.info("Configuration sent to client")
        return payload

    @app.get("/api/files")
    def list_files(request: Request):
        logger.info("GET /api/files - Client requesting file list")
        files = _files(request).list_files()
        logger.info(f"Sent file list: {len(files)} files")
        return {"files": [f.to_dict() for f in files]}

    @app.get("/api/files/{filename}")
    def read_file(filename: str, request: Request):
        logger.info(f"GET /api/files/{filename} - Client requesting file content")
        content, path = _files(request).read_file(filename)
        logger.info(
            f"File read successfully: {filename} "
            f"({len(content)} characters, ~{_count_lines(content)} lines)"
        )
        return {"content": content, "filePath": str(path)}

    @app.post("/api/files/{filename}")
    def save_file(filename: str, body: SaveRequest, request: Request):
        logger.info(f"POST /api/files/{filename} - Client requesting file save")
        result = _files(request).write_file(filename, body.content)
        logger.info(
            f"File saved successfully: {filename} "
            f"({len(body.content)} characters, ~{_count_lines(body.content)} lines)"
        )
        return {"success": True, "filePath": str(result.file_path)}

    # ── Browser UI ───────────────────────────────────────────────────────────

    if STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/", response_class=HTMLResponse)
    def index():
        index_path = STATIC_DIR / "index.html"
        if index_path.exists():
            return FileResponse(index_path)
        return HTMLResponse("<h1>JSONL Editor</h1><p>API is available at /api/</p>")

    return app
