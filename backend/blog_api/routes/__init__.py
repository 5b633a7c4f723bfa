"""
Blog API - API Routes Package
===============================

Route Inventory:
    - posts.py:   /blog/posts, /blog/post, /blog/edit, /blog/delete
    - health.py:  GET /health

Routes are thin: they validate identifiers, call a service, and shape the
response. Each module exposes create_router(...), which takes the concrete
collaborators the routes need.
"""
