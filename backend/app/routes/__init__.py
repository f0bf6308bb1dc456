# Routes package init
"""
Quill Backend — API Routes Package
===================================

Route Inventory:
    - posts.py:   GET    /api/posts          (list, newest first)
                  POST   /api/posts          (create)
                  GET    /api/posts/{id}     (read)
                  PUT    /api/posts/{id}     (partial update)
                  DELETE /api/posts/{id}     (hard delete)
    - health.py:  GET    /health             (store connectivity)
                  GET    /                   (plain-text banner)

Routes stay thin: take the request apart, call one store operation, return
the result. Status codes for failures come from the exception handlers.
"""
