from fastapi import APIRouter, HTTPException, Query
from pathlib import Path
from fastapi.responses import PlainTextResponse

from modrewrite.config import TSX_EXTENSIONS
from modrewrite.services.errors import TransformError
from modrewrite.services.rewrite import transform_source

router = APIRouter(prefix="/api/files", tags=["files"])

@router.get("/transformed", response_class=PlainTextResponse)
async def get_transformed_file(path: str = Query(..., description="Absolute path to the file")):
    """
    Get the rewritten content of a JS/TS file. Nothing is written to disk.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    if not file_path.is_file():
        raise HTTPException(status_code=400, detail="Path is not a file")

    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=500, detail=f"Failed to read file: {str(e)}")

    try:
        return transform_source(source, tsx=file_path.suffix in TSX_EXTENSIONS)
    except TransformError as e:
        raise HTTPException(status_code=422, detail=str(e))
