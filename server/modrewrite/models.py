from typing import List, Optional
from pydantic import BaseModel, Field

class TransformRequest(BaseModel):
    source: str
    # Parse with the TSX grammar instead of the TypeScript one
    tsx: bool = False

class TransformResponse(BaseModel):
    code: str

class DirectoryTransformRequest(BaseModel):
    path: str
    # When omitted, results are reported but nothing is written
    out_dir: Optional[str] = None

class FileTransformResult(BaseModel):
    path: str
    ok: bool
    error: Optional[str] = None
    output_path: Optional[str] = None

class DirectoryTransformResponse(BaseModel):
    root: str
    transformed: int = 0
    failed: int = 0
    files: List[FileTransformResult] = Field(default_factory=list)
