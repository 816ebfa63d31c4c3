"""
ChoreoNotes Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:      /api/auth/register, /login, /logout, /me
    - moves.py:     /api/moves and /api/moves/{id}
    - routines.py:  /api/routines, /api/routines/{id} and the nested
                    /api/routines/{id}/moves composition
    - health.py:    GET /health

Routes stay thin: parse the request, call a service, shape the response.
Ownership and validation failures surface as exceptions handled in main.py.
"""
