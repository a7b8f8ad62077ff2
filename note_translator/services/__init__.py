# Services package init
"""
Note Translator — Services Layer
==================================

What:  Business logic between the routes (HTTP) and the hosted model.

Service Inventory:
    - Transcriber (abstract): one image → one Note
    - GeminiTranscriber: Google Gemini with a strict JSON output schema
    - TranscriptionService: sequential batch loop with per-image fallback
"""
