# Client package init
"""
Note Translator — Client Layer
================================

What:  Everything that runs on the user's side of the batch endpoint.

    - api_client.py:  TranscriptionClient, one httpx call per batch
    - session.py:     ReviewSession, the collect → process → review flow
"""
