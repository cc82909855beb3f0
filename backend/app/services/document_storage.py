"""
Document Storage Service

Stores supporting documents (medical certificates and the like) attached
to leave requests, with a JSON metadata file next to each document.
"""

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(filename: Optional[str]) -> str:
    name = Path(filename or "document").name
    return _UNSAFE_FILENAME_CHARS.sub("_", name) or "document"


class DocumentStorage:
    """
    Manages document files on the local filesystem.

    Layout: {base_path}/documents/{leave_id}/{document_id}_{filename}
    plus {document_id}.json holding the metadata.
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Base directory for all storage operations
        """
        self.base_path = Path(base_path)
        self.documents_path = self.base_path / "documents"

    async def save_document(self, leave_id: str, file: UploadFile, size: int) -> dict:
        """
        Save an uploaded document and its metadata.

        Args:
            leave_id: Leave request the document belongs to
            file: Uploaded file
            size: File size in bytes (already validated)

        Returns:
            dict: Stored document metadata

        Raises:
            OSError: If directory creation or file write fails
        """
        document_id = str(uuid.uuid4())
        filename = _safe_filename(file.filename)

        leave_dir = self.documents_path / leave_id
        leave_dir.mkdir(parents=True, exist_ok=True)
        file_path = leave_dir / f"{document_id}_{filename}"

        metadata = {
            "document_id": document_id,
            "leave_id": leave_id,
            "filename": file.filename or filename,
            "size": size,
            "content_type": file.content_type,
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            content = await file.read()
            with open(file_path, "wb") as f:
                f.write(content)
            file_path.chmod(0o644)

            with open(leave_dir / f"{document_id}.json", "w") as f:
                json.dump(metadata, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to store document for leave {leave_id}: {e}")
            raise

        logger.info(f"Stored document {document_id} for leave {leave_id} at {file_path}")
        return metadata

    def list_documents(self, leave_id: str) -> list[dict]:
        """Load metadata for every document stored for leave_id."""
        leave_dir = self.documents_path / leave_id
        if not leave_dir.exists():
            return []

        documents = []
        for metadata_path in sorted(leave_dir.glob("*.json")):
            try:
                with open(metadata_path) as f:
                    documents.append(json.load(f))
            except (json.JSONDecodeError, OSError) as e:
                logger.error(f"Failed to read document metadata {metadata_path}: {e}")
        return documents
