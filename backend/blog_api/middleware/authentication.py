"""
Blog API - Authentication Middleware
======================================

What:  Bearer-token gate in front of the mutating post routes.
How:   Before dispatch, the request's (method, path) is compared against an
       explicit list of protected routes. Protected requests must carry a
       token that the TokenVerifier accepts; anything else gets a JSON 401 and
       never reaches the route handler.

Protected routes:
    POST   /blog/post
    PUT    /blog/edit
    DELETE /blog/delete

All other routes, including the GET routes on the same paths' prefix, pass
through untouched. On success the verified claims are placed on
request.state.claims.
"""

import logging
from typing import Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from blog_api.exceptions import AuthenticationError
from blog_api.middleware.request_id import request_id_var
from blog_api.services.auth_service import TokenVerifier, extract_bearer_token

logger = logging.getLogger(__name__)

PROTECTED_ROUTES: Tuple[Tuple[str, str], ...] = (
    ("POST", "/blog/post"),
    ("PUT", "/blog/edit"),
    ("DELETE", "/blog/delete"),
)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Rejects unauthenticated requests to protected routes.

    Args:
        verifier: TokenVerifier used for every protected request
        protected_routes: (METHOD, path) pairs, matched exactly
            (a trailing slash on the request path is ignored)
    """

    def __init__(
        self,
        app: ASGIApp,
        verifier: TokenVerifier,
        protected_routes: Iterable[Tuple[str, str]] = PROTECTED_ROUTES,
    ):
        super().__init__(app)
        self.verifier = verifier
        self.protected_routes = {
            (method.upper(), path.rstrip("/")) for method, path in protected_routes
        }

    def is_protected(self, method: str, path: str) -> bool:
        return (method.upper(), path.rstrip("/")) in self.protected_routes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.is_protected(request.method, request.url.path):
            return await call_next(request)

        try:
            token = extract_bearer_token(request.headers.get("Authorization"))
            request.state.claims = await self.verifier.verify(token)
        except AuthenticationError as exc:
            rid = request_id_var.get("")
            logger.warning(
                "[%s] Rejected %s %s: %s",
                rid,
                request.method,
                request.url.path,
                exc.message,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": "unauthorized",
                    "message": exc.message,
                    "request_id": rid,
                },
                headers={"WWW-Authenticate": "Bearer"},
            )

        return await call_next(request)
