"""
Blog API - Identifier Validation Tests
========================================

What:  Tests for is_valid_post_id() and validate_post_id().
How:   Pure functions, no fixtures needed.
"""

import uuid

import pytest

from blog_api.exceptions import InvalidIdentifierError
from blog_api.services.identifiers import is_valid_post_id, validate_post_id


class TestIsValidPostId:

    def test_uuid_string_is_valid(self):
        assert is_valid_post_id(str(uuid.uuid4())) is True

    def test_hex_form_is_valid(self):
        assert is_valid_post_id(uuid.uuid4().hex) is True

    @pytest.mark.parametrize("value", [None, "", "not-a-valid-id", "12345", "zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz"])
    def test_malformed_values_are_invalid(self, value):
        assert is_valid_post_id(value) is False

    def test_non_string_is_invalid(self):
        assert is_valid_post_id(12345) is False


class TestValidatePostId:

    def test_returns_value_unchanged(self):
        post_id = str(uuid.uuid4())
        assert validate_post_id(post_id) == post_id

    def test_malformed_raises_invalid_id(self):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            validate_post_id("not-a-valid-id")

        assert exc_info.value.message == "Invalid ID!"
        assert exc_info.value.field == "postID"

    def test_missing_value_raises(self):
        """An absent query parameter is treated as malformed, not as a lookup."""
        with pytest.raises(InvalidIdentifierError):
            validate_post_id(None)

    def test_field_name_is_carried(self):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            validate_post_id("bad", field="post_id")

        assert exc_info.value.context["field"] == "post_id"
