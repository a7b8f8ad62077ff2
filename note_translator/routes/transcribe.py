"""
Note Translator — Batch Transcription Route
=============================================

What:  Handles POST /api/img-to-text: many images in, one note per image out.
Why:   Entry point for the core feature: converting note photos to text.
How:   Parses the multipart body, reads every file under the `images` field,
       delegates to TranscriptionService, returns the notes in order.
Who:   Called by the review session's HTTP client.

Request Flow:
    1. Client sends multipart/form-data with zero or more `images` parts
    2. No files → NoImagesError → 400 (nothing is processed)
    3. Every upload is read into an ImageUpload (bytes + media type)
    4. TranscriptionService transcribes them one by one
    5. Return 200 with {"notes": [...]} aligned with the uploads

Failure boundary:
    Everything in this handler is batch-level. Errors raised here (bad
    multipart body, unreadable upload) become BatchProcessingError → 500.
    Per-image failures never reach this level; the service already turned
    them into fallback notes.
"""

import logging
import mimetypes
from typing import List

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from note_translator.config import settings
from note_translator.exceptions import BatchProcessingError, NoImagesError
from note_translator.schemas.note import ErrorResponse, ImageUpload, TranscribeResponse
from note_translator.services.transcription_service import transcription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Transcribe"])


def _media_type_of(upload: UploadFile) -> str:
    """Declared part content type, else a guess from the filename."""
    if upload.content_type:
        return upload.content_type
    guessed, _ = mimetypes.guess_type(upload.filename or "")
    return guessed or "application/octet-stream"


async def _read_uploads(uploads: List[UploadFile]) -> List[ImageUpload]:
    images = []
    for upload in uploads:
        content = await upload.read()
        images.append(
            ImageUpload(
                filename=upload.filename or None,
                content=content,
                media_type=_media_type_of(upload),
            )
        )
    return images


@router.post(
    "/img-to-text",
    response_model=TranscribeResponse,
    responses={
        200: {"description": "One note per image, same order", "model": TranscribeResponse},
        400: {"description": "No image files in the request", "model": ErrorResponse},
        500: {"description": "The batch could not be processed", "model": ErrorResponse},
    },
    summary="Transcribe a batch of handwritten note images",
    description=(
        "Upload one or more handwritten note images under the `images` field. "
        "Each image is transcribed separately by Google Gemini. A failing image "
        "yields a placeholder note instead of failing the batch."
    ),
)
async def transcribe_images(request: Request) -> TranscribeResponse:
    """
    Transcribe every uploaded image into a note.

    Returns:
        TranscribeResponse (HTTP 200) with exactly one note per image.

    Error responses (handled by global exception handlers):
        HTTP 400: No files provided (NoImagesError)
        HTTP 500: Batch-level failure (BatchProcessingError)
    """
    form = None
    try:
        form = await request.form()
        uploads = [
            item
            for item in form.getlist(settings.upload_field_name)
            if isinstance(item, UploadFile)
        ]

        if not uploads:
            raise NoImagesError()

        logger.info(
            "Received transcription request: %d file(s): %s",
            len(uploads),
            ", ".join(u.filename or "unnamed" for u in uploads),
        )

        images = await _read_uploads(uploads)
        notes = await transcription_service.transcribe_batch(images)
        return TranscribeResponse(notes=notes)

    except NoImagesError:
        raise
    except Exception as e:
        logger.error("Error processing images: %s", str(e), exc_info=True)
        raise BatchProcessingError(
            context={"error_type": type(e).__name__},
        ) from e
    finally:
        if form is not None:
            await form.close()
