from typing import Dict, FrozenSet
from urllib.parse import quote
from fastapi import HTTPException, UploadFile, status
from fastapi.responses import Response
from app.core.s3 import StoredObject

SPREADSHEET_TYPES: FrozenSet[str] = frozenset({
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
})

DOCUMENT_TYPES: FrozenSet[str] = frozenset({
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/jpg",
    "image/gif",
    "image/webp",
})


def require_content_type(file: UploadFile, allowed: FrozenSet[str], message: str) -> str:
    """
    Return the upload's content type, or reject it with 400.
    """
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type not in allowed:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return content_type


def upload_metadata(file_name: str, uploaded_by: str, **extra: str) -> Dict[str, str]:
    # S3 metadata values must be ASCII
    metadata = {"originalName": quote(file_name), "uploadedBy": uploaded_by}
    metadata.update(extra)
    return metadata


def file_response(stored: StoredObject, file_name: str, disposition: str = "attachment") -> Response:
    """
    Serve a stored object as a file download.
    """
    ascii_name = file_name.encode("ascii", "ignore").decode("ascii").replace('"', "") or "file"
    return Response(
        content=stored.body,
        media_type=stored.content_type,
        headers={
            "Content-Disposition": (
                f'{disposition}; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(file_name)}'
            ),
        },
    )
