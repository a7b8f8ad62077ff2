"""
Note Translator — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the batch transcription flow.
Why:   Each failure kind has a different blast radius. One image failing
       must stay local to that image, while a broken request fails the
       whole batch. Distinct types make that policy explicit at every
       except clause.
How:   Each exception carries a user-safe message and an optional context
       dict. Global handlers (registered in main.py) map the batch-level
       ones to HTTP responses.

Exception Hierarchy:
    NoteTranslatorError (base)
    ├── NoImagesError          → 400 Bad Request (nothing to process)
    ├── TranscriptionError     → never reaches HTTP; becomes a fallback note
    ├── BatchProcessingError   → 500 Internal Server Error
    ├── ClientRequestError     → client side; review session shows an error
    └── InvalidStateError      → client side; action not allowed in this view
"""

from typing import Any, Dict, Optional


class NoteTranslatorError(Exception):
    """
    Base exception for all Note Translator errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NoImagesError(NoteTranslatorError):
    """
    Raised when a batch request carries no image files.

    HTTP:    400 Bad Request
    When:    Checked before any processing; no model call is made.
    """

    def __init__(
        self,
        message: str = "No files provided",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TranscriptionError(NoteTranslatorError):
    """
    Raised when transcribing ONE image fails.

    What:    The model call raised, the credential is missing, or the image
             itself was rejected (empty, too large).
    Who:     Raised by transcribers; caught by TranscriptionService, which
             substitutes a fallback note for that image only.
    """

    def __init__(
        self,
        message: str = "Failed to transcribe image",
        filename: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if filename:
            ctx["filename"] = filename
        super().__init__(message=message, context=ctx)
        self.filename = filename


class BatchProcessingError(NoteTranslatorError):
    """
    Raised when something outside the per-image loop fails.

    HTTP:    500 Internal Server Error
    When:    Malformed multipart body, unreadable upload, unexpected error
             in the batch orchestrator. The batch never partially succeeds.
    """

    def __init__(
        self,
        message: str = "Failed to process images",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ClientRequestError(NoteTranslatorError):
    """
    Raised by the HTTP client when a batch call fails or returns an
    unexpected shape.

    Who:     Caught by ReviewSession.submit(), which reverts to collecting
             and keeps the selected images.
    """

    def __init__(
        self,
        message: str = "Failed to process images",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class InvalidStateError(NoteTranslatorError):
    """
    Raised when a review session action does not fit the current view.

    When:    Submitting while a batch is already in flight, adding images
             while reviewing, editing notes before any exist.
    """

    def __init__(
        self,
        action: str,
        state: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["action"] = action
        ctx["state"] = state
        super().__init__(message=f"Cannot {action} while {state}", context=ctx)
        self.action = action
        self.state = state
