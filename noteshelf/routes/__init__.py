# Routes package init
"""
Noteshelf — API Routes Package
================================

Route Inventory:
    - notes.py:   GET    /api/notes            (list, search, filter, sort)
                  GET    /api/notes/tags       (tag usage summary)
                  POST   /api/notes            (create)
                  GET    /api/notes/{id}       (read)
                  PUT    /api/notes/{id}       (update)
                  DELETE /api/notes/{id}       (delete)
    - health.py:  GET    /health               (service health check)

Routes stay thin: resolve the session, call the repository, wrap the result.
"""
