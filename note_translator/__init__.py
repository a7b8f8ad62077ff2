"""
Note Translator — Application Package Initializer
===================================================

What:  Turns photos of handwritten notes into editable digital text.

Architecture Note:

    ┌─────────────────────────────────────┐
    │    Review session + CLI (client)    │  ← collect, submit, edit, copy
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← batch loop, per-image fallback
    ├─────────────────────────────────────┤
    │      Transcriber (Google Gemini)    │  ← one image → one Note
    └─────────────────────────────────────┘

    Nothing is persisted: notes live only in the client's review session.
"""

__version__ = "1.0.0"
