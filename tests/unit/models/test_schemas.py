"""
Unit tests for request body schemas.
"""

import pytest

from photogallery.errors import ValidationError
from photogallery.models.schemas import PhotoUpdate


class TestPhotoUpdate:
    """Test cases for PhotoUpdate.parse_body."""

    def test_title_and_description(self):
        update = PhotoUpdate.parse_body({"title": "Dawn", "description": "Early"})

        assert update.title == "Dawn"
        assert update.description == "Early"

    def test_partial_update(self):
        update = PhotoUpdate.parse_body({"title": "Dawn"})

        assert update.title == "Dawn"
        assert update.description is None

    def test_unknown_fields_are_ignored(self):
        update = PhotoUpdate.parse_body({"fileName": "evil.jpg", "size": 1, "title": "Dawn"})

        assert update.title == "Dawn"
        assert not hasattr(update, "fileName")

    def test_empty_object(self):
        update = PhotoUpdate.parse_body({})

        assert update.title is None
        assert update.description is None

    @pytest.mark.parametrize("body", [None, [], "title", 42])
    def test_non_object_body(self, body):
        with pytest.raises(ValidationError) as exc_info:
            PhotoUpdate.parse_body(body)

        assert exc_info.value.code == "malformed_body"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("body", [{"title": 5}, {"description": ["a"]}, {"title": {"x": 1}}])
    def test_wrong_field_types(self, body):
        with pytest.raises(ValidationError) as exc_info:
            PhotoUpdate.parse_body(body)

        assert exc_info.value.code == "malformed_body"
        assert exc_info.value.details["fields"]
