"""
Document size checks for leave attachments.

Measures an upload chunk by chunk so a large document is never held in
memory, then rewinds it for the storage layer.
"""

import logging

from fastapi import UploadFile

from .error_handler import DocumentTooLargeError, EmptyDocumentError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def validate_document_size(file: UploadFile, max_bytes: int) -> int:
    """
    Measure an uploaded document and enforce the accepted size range.

    Args:
        file: Uploaded document
        max_bytes: Largest accepted size in bytes

    Returns:
        int: Document size in bytes, with the file rewound to its start

    Raises:
        EmptyDocumentError: 400 if the document has no content
        DocumentTooLargeError: 413 as soon as more than max_bytes were read
    """
    size = 0
    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                f"Rejected document {file.filename!r}: over {max_bytes} bytes"
            )
            raise DocumentTooLargeError(max_bytes)

    if size == 0:
        logger.warning(f"Rejected empty document {file.filename!r}")
        raise EmptyDocumentError(file.filename)

    await file.seek(0)
    logger.debug(f"Document {file.filename!r} accepted: {size} bytes")
    return size
