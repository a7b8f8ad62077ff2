"""
Note Translator — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between client and server.
Why:   Strict validation, automatic serialization, and OpenAPI doc generation.
Who:   Used by services and routes on the server, and by the HTTP client to
       validate what comes back.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


DEFAULT_NOTE_TITLE = "Transcribed Note"
TRANSCRIBE_FAILED_MARKER = "Failed to transcribe"
FALLBACK_NOTE_CONTENT = "Error processing this image"


class Note(BaseModel):
    """
    What:  One transcribed image: a title plus the transcribed content.
    Who:   Produced by a transcriber for exactly one input image.

    Only `content` is edited afterwards (by the review session); the
    title is fixed once the model returns it.
    """
    title: str = Field(description="Brief title describing the overall content of the image")
    content: str = Field(description="Complete transcribed and formatted note content")

    @classmethod
    def fallback(cls, image_label: str) -> "Note":
        """Placeholder note for an image whose transcription failed."""
        return cls(
            title=f"Failed to transcribe {image_label}",
            content=FALLBACK_NOTE_CONTENT,
        )


class ImageUpload(BaseModel):
    """
    What:  One image of a submission batch, already read into memory.
    Who:   Built by the route from multipart uploads, and by the review
           session from files the user selected.
    """
    filename: Optional[str] = Field(default=None, description="Original filename, if any")
    content: bytes = Field(description="Raw image bytes")
    media_type: str = Field(description="Declared media type, e.g. image/jpeg")

    def label(self, position: int) -> str:
        """Name used in fallback titles; 1-based position when unnamed."""
        return self.filename or f"image {position}"


class TranscribeResponse(BaseModel):
    """
    What:  Response of POST /api/img-to-text.

    Ordering contract:
        notes[i] belongs to the i-th submitted image. Pairing is by
        position only, so the list always has exactly as many entries as
        images were submitted.
    """
    notes: List[Note] = Field(description="One note per submitted image, same order")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "no_files",
            "message": "No files provided",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    gemini: str = Field(description="Gemini credential status: configured, missing_api_key")
    uptime_seconds: float = Field(description="Seconds since service started")
