"""Attachment (blob) API: upload, list by note, download, delete.

Every operation checks that the attachment's note belongs to the caller;
a mismatch is reported as 404 so existence is never leaked.
"""

from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from sqlalchemy.orm import Session

from ..core.auth import OwnerContext, require_owner
from ..database import get_db
from ..services.attachment_service import AttachmentService
from ..schemas.attachment import AttachmentResponse

router = APIRouter(prefix="/api/blobs", tags=["attachments"])


@router.post("", response_model=AttachmentResponse, status_code=201)
def upload_attachment(
    note_id: str = Form(...),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    """Store an uploaded file on a note. 400 for a missing, empty or oversized file.

    Plain ``def`` so the blocking read and the DB write run in the threadpool.
    At most one byte past the limit is read, so an oversized upload is
    rejected without being buffered in full.
    """
    service = AttachmentService(db)
    if file is None:
        return service.put(ctx.owner, note_id, None, None)

    data = file.file.read(service.max_bytes + 1)
    content_type = file.content_type
    if content_type == "application/octet-stream":
        content_type = None  # let the filename decide
    return service.put(ctx.owner, note_id, file.filename, data, content_type)


@router.get("", response_model=List[AttachmentResponse])
def list_attachments(
    note_id: str = Query(...),
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    return AttachmentService(db).list_by_note(ctx.owner, note_id)


@router.get("/{blob_id}")
def download_attachment(
    blob_id: str,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    attachment = AttachmentService(db).get(ctx.owner, blob_id)
    return Response(
        content=attachment.data,
        media_type=attachment.mime,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(attachment.filename)}",
        },
    )


@router.delete("/{blob_id}", status_code=204)
def delete_attachment(
    blob_id: str,
    db: Session = Depends(get_db),
    ctx: OwnerContext = Depends(require_owner),
):
    AttachmentService(db).delete(ctx.owner, blob_id)
