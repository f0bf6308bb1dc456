# Middleware package init
"""
Quill Backend — Middleware Package
===================================

Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any processing
    2. Request ID: correlation id for logs and error bodies
    3. Logging: access line with status and duration
    4. GZip / CORS: provided by FastAPI
"""
