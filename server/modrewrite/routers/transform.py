from fastapi import APIRouter, HTTPException
from pathlib import Path

from modrewrite.models import (
    DirectoryTransformRequest,
    DirectoryTransformResponse,
    FileTransformResult,
    TransformRequest,
    TransformResponse,
)
from modrewrite.services import batch
from modrewrite.services.errors import TransformError
from modrewrite.services.rewrite import transform_source

router = APIRouter(prefix="/api/transform", tags=["transform"])


@router.post("", response_model=TransformResponse)
async def transform(request: TransformRequest):
    """
    Rewrite the module declarations in a single piece of source text.
    """
    try:
        code = transform_source(request.source, tsx=request.tsx)
    except TransformError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return TransformResponse(code=code)


@router.post("/directory", response_model=DirectoryTransformResponse)
def transform_directory(request: DirectoryTransformRequest):
    """
    Rewrite every JS/TS file under a directory.

    Files that fail are reported individually; the request itself only fails
    when the path doesn't exist.
    """
    root = Path(request.path)
    if not root.exists():
        raise HTTPException(status_code=404, detail="Path not found")

    out_dir = Path(request.out_dir) if request.out_dir else None
    results = batch.transform_directory(root, out_dir=out_dir)

    files = [
        FileTransformResult(
            path=r.path,
            ok=r.ok,
            error=r.error,
            output_path=r.output_path,
        )
        for r in results
    ]
    transformed = sum(1 for f in files if f.ok)
    return DirectoryTransformResponse(
        root=str(root),
        transformed=transformed,
        failed=len(files) - transformed,
        files=files,
    )
