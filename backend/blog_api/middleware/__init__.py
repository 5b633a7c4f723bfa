"""
Blog API - Middleware Package
===============================

Middleware Chain (request direction):
    Request → [CORS] → [GZip] → [Request ID] → [Logging] → [Authentication] → Route Handler

    1. CORS outermost: 401s from the gate still carry CORS headers
    2. Request ID: every later log line and error body can carry it
    3. Logging: records the final status, including 401s from the gate
    4. Authentication: rejects protected requests before any handler runs
"""
