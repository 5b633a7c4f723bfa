"""
Blog API - Application Package
================================

What: Blog-post CRUD backend with bearer-token protected writes.

Layers:

    ┌─────────────────────────────────────┐
    │        Routes + Middleware (HTTP)   │  ← status codes, auth gate
    ├─────────────────────────────────────┤
    │         Services (Post access)      │  ← get / list / add / edit / delete
    ├─────────────────────────────────────┤
    │       Repositories (Persistence)    │  ← SQL table or in-memory map
    └─────────────────────────────────────┘

Routes validate identifiers and translate empty results into 404s; services
hold no HTTP knowledge; repositories are swappable behind one interface.
"""

__version__ = "1.0.0"
