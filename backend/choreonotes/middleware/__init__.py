"""
ChoreoNotes Backend — Middleware Package
=========================================

Middleware chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Rate Limit: rejects over-limit clients on /api before anything else runs
    - Request ID: sets the correlation id the later layers log
    - Logging:    one access line per request, with status and duration
"""
