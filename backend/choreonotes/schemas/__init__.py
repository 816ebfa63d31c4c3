# Schemas package init
"""
ChoreoNotes Backend — Pydantic Request/Response Schemas
========================================================

What:  The validation collaborator. Request models normalize raw JSON input
       (or return field-level errors); response models define exactly what
       leaves the API (password hashes never do).

Modules:
    - common.py:   ErrorResponse, MessageResponse, HealthResponse
    - user.py:     registration / login payloads and the public user projection
    - move.py:     move create / update payloads and responses
    - routine.py:  routine and composition payloads and responses
"""
