# Routes package init
"""
BeliLite Backend — API Routes Package
=======================================

Route Inventory:
    - notes.py:      /api/notes CRUD
    - summarize.py:  POST /api/summarize
    - health.py:     GET  /health

Routes are thin: they extract request data, call a service, and return the
result. Error status codes come from the handlers registered in main.py.
"""
