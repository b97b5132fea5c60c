"""Static front-end bundle.

Any GET that no API route claimed resolves to a file under STATIC_DIR
(legal pages, ads.txt, robots.txt, sitemap.xml, JS/CSS). Everything else,
including paths escaping the directory, falls back to index.html.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["frontend"])

INDEX_FILE = "index.html"


def resolve_static_file(static_dir: Path, requested: str) -> Path:
    root = static_dir.resolve()
    if requested:
        candidate = (root / requested).resolve()
        if candidate.is_file() and candidate.is_relative_to(root):
            return candidate
    return root / INDEX_FILE


@router.get("/{full_path:path}", include_in_schema=False)
def serve_frontend(full_path: str, request: Request):
    path = resolve_static_file(request.app.state.settings.static_dir, full_path)
    if not path.is_file():
        logger.warning(f"Front-end entry document missing: {path}")
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path)
