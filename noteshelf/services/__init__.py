# Services package init
"""
Noteshelf — Services Layer
============================

Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - NoteRepository: owner-scoped note queries and CRUD
"""
