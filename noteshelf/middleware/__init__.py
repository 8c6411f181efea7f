# Middleware package init
"""
Noteshelf — Middleware Package
================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can be correlated
    2. Logging wraps everything below it, so the duration it reports covers
       the whole handler including database work
"""
