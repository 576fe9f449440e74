import mimetypes

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from src.adapters.fs.uploads import UploadStore
from src.api.deps import get_upload_store

router = APIRouter()


@router.get("/{handle:path}")
def serve_upload(handle: str, files: UploadStore = Depends(get_upload_store)) -> Response:
    """Serve an uploaded media or verification file by its handle."""
    try:
        data = files.read(handle)
    except (FileNotFoundError, ValueError):
        raise HTTPException(status_code=404, detail="File not found") from None
    media_type = mimetypes.guess_type(handle)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
