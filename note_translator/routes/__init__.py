# Routes package init
"""
Note Translator — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - transcribe.py:  POST /api/img-to-text   (batch of images → notes)
    - health.py:      GET  /health             (service health check)

Design Principle:
    Routes are THIN: they extract data from the request, call the
    service, and shape the response. The per-image failure policy lives in
    TranscriptionService, not here.
"""
