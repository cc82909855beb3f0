"""
Document Upload Response Pydantic Model

Defines the response structure for leave document attachments.
"""

from pydantic import BaseModel, Field


class DocumentUploadResponse(BaseModel):
    """Returned by POST /api/leaves/{leave_id}/documents after the file is stored."""

    document_id: str = Field(..., description="UUID v4 identifier of the stored document")
    leave_id: str = Field(..., description="Leave request the document belongs to")
    filename: str = Field(..., description="Original uploaded filename")
    size: int = Field(..., description="File size in bytes")
    content_type: str | None = Field(None, description="MIME type reported by the client")
    uploaded_at: str = Field(..., description="ISO-8601 upload timestamp")
