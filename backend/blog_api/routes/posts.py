"""
Blog API - Post Route Handlers
================================

What:  The /blog routes, one PostService call per route.
How:   create_router(post_service) builds an APIRouter bound to the given
       service. Handlers validate identifiers, call the service, and turn an
       empty result into PostNotFoundError (404).

Route Inventory:
    GET    /blog/posts               → 200 [post, ...]
    GET    /blog/post/{postID}       → 200 post            | 400 | 404
    POST   /blog/post                → 200 {message, post}            (auth)
    PUT    /blog/edit?postID=...     → 200 {message, post} | 400 | 404 (auth)
    DELETE /blog/delete?postID=...   → 200 {message, post} | 400 | 404 (auth)

Authentication is enforced by AuthenticationMiddleware before these handlers
run; nothing here inspects tokens.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from blog_api.exceptions import PostNotFoundError
from blog_api.schemas.post import (
    ErrorResponse,
    PostFields,
    PostMutationResponse,
    PostResponse,
)
from blog_api.services.identifiers import validate_post_id
from blog_api.services.post_service import PostService

logger = logging.getLogger(__name__)


def valid_post_id_query(
    post_id: Optional[str] = Query(default=None, alias="postID", description="Identifier of the target post"),
) -> str:
    """
    Resolve and validate the postID query parameter.

    Runs as a dependency, so a malformed ID is rejected with 400 before the
    request body is validated.
    """
    return validate_post_id(post_id)


def create_router(post_service: PostService) -> APIRouter:
    """Build the /blog router around post_service."""
    router = APIRouter(prefix="/blog", tags=["Posts"])

    @router.get(
        "/posts",
        response_model=List[PostResponse],
        summary="List all posts",
    )
    async def get_posts() -> List[PostResponse]:
        return await post_service.get_posts()

    @router.get(
        "/post/{post_id}",
        response_model=PostResponse,
        responses={
            400: {"description": "Malformed post ID", "model": ErrorResponse},
            404: {"description": "Post not found", "model": ErrorResponse},
        },
        summary="Get a single post",
    )
    async def get_post(post_id: str) -> PostResponse:
        post_id = validate_post_id(post_id)
        post = await post_service.get_post(post_id)
        if post is None:
            raise PostNotFoundError(post_id, message="Post does not exist!")
        return post

    @router.post(
        "/post",
        response_model=PostMutationResponse,
        responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
        summary="Submit a new post",
    )
    async def add_post(fields: PostFields) -> PostMutationResponse:
        post = await post_service.add_post(fields)
        return PostMutationResponse(
            message="Post has been submitted successfully",
            post=post,
        )

    @router.put(
        "/edit",
        response_model=PostMutationResponse,
        responses={
            400: {"description": "Malformed post ID", "model": ErrorResponse},
            401: {"description": "Missing or invalid token", "model": ErrorResponse},
            404: {"description": "Post not found", "model": ErrorResponse},
        },
        summary="Replace every field of a post",
    )
    async def edit_post(
        fields: PostFields,
        post_id: str = Depends(valid_post_id_query),
    ) -> PostMutationResponse:
        post = await post_service.edit_post(post_id, fields)
        if post is None:
            raise PostNotFoundError(post_id)
        return PostMutationResponse(
            message="Post has been successfully updated",
            post=post,
        )

    @router.delete(
        "/delete",
        response_model=PostMutationResponse,
        responses={
            400: {"description": "Malformed post ID", "model": ErrorResponse},
            401: {"description": "Missing or invalid token", "model": ErrorResponse},
            404: {"description": "Post not found", "model": ErrorResponse},
        },
        summary="Delete a post",
    )
    async def delete_post(post_id: str = Depends(valid_post_id_query)) -> PostMutationResponse:
        post = await post_service.delete_post(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return PostMutationResponse(
            message="Post has been deleted!",
            post=post,
        )

    return router
