"""
Blog API - Post Identifier Validation
=======================================

What:  Format check for post identifiers taken from paths and query strings.
How:   An identifier is valid when uuid.UUID() accepts it. The value is
       returned unchanged; stores convert it themselves.

This is a syntax check only. Whether a post with that ID exists is for the
store to answer.
"""

import uuid
from typing import Optional

from blog_api.exceptions import InvalidIdentifierError


def is_valid_post_id(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def validate_post_id(value: Optional[str], field: str = "postID") -> str:
    """
    Return value unchanged if it is a well-formed post identifier.

    Raises:
        InvalidIdentifierError: value is missing or not a UUID (→ 400 "Invalid ID!")
    """
    if not is_valid_post_id(value):
        raise InvalidIdentifierError(value=value, field=field)
    return value
