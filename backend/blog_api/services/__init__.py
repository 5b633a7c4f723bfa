"""
Blog API - Services Layer
===========================

What:  Logic between the HTTP layer and the post stores.

Service Inventory:
    - identifiers:   validate_post_id() format check
    - PostService:   get / list / add / edit / delete over a PostRepository
    - JwksClient:    cached, rate-limited identity provider key lookup
    - TokenVerifier: bearer token extraction and RS256 verification

Services are constructed once in create_app() and handed to the routes and
middleware that use them.
"""
