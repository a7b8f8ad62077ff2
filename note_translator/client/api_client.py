"""
Note Translator — HTTP Client for the Batch Endpoint
======================================================

What:  Sends one batch of images to POST /api/img-to-text and returns the notes.
Why:   The review session needs a single call that either yields a list of
       notes or fails as a whole; this class gives it exactly that.
How:   httpx multipart upload, every image under the `images` field, then a
       strict check of the response shape.

Timeout:
    None by default. A batch takes one model call per image, so any fixed
    timeout would cut off large batches; the transport decides.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from note_translator.config import settings
from note_translator.exceptions import ClientRequestError
from note_translator.schemas.note import ImageUpload, Note

logger = logging.getLogger(__name__)

TRANSCRIBE_PATH = "/api/img-to-text"


class TranscriptionClient:
    """
    Async client for the batch transcription endpoint.

    Args:
        base_url:  Server root, e.g. "http://localhost:8000".
        timeout:   httpx timeout; None waits for the full batch.
        transport: Optional httpx transport (tests pass MockTransport or
                   ASGITransport here).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _multipart_files(self, images: List[ImageUpload]):
        field = settings.upload_field_name
        return [
            (field, (image.label(position), image.content, image.media_type))
            for position, image in enumerate(images, start=1)
        ]

    async def transcribe(self, images: List[ImageUpload]) -> List[Note]:
        """
        Submit one batch and return its notes.

        Returns:
            Notes index-aligned with `images`.

        Raises:
            ClientRequestError: transport failure, non-2xx status, or a body
            that is not {"notes": [{title, content}, ...]}.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    TRANSCRIBE_PATH, files=self._multipart_files(images)
                )
        except httpx.HTTPError as e:
            logger.error("Batch request to %s failed: %s", self.base_url, str(e))
            raise ClientRequestError(
                message="Failed to process images",
                context={"error_type": type(e).__name__},
            ) from e

        if response.is_error:
            logger.error(
                "Batch request rejected: HTTP %d %s",
                response.status_code,
                response.text[:200],
            )
            raise ClientRequestError(
                message="Failed to process images",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ClientRequestError(message="Invalid response format") from e

        notes = data.get("notes") if isinstance(data, dict) else None
        if not isinstance(notes, list):
            raise ClientRequestError(message="Invalid response format")

        try:
            return [Note.model_validate(item) for item in notes]
        except PydanticValidationError as e:
            raise ClientRequestError(
                message="Invalid response format",
                context={"errors": e.error_count()},
            ) from e
