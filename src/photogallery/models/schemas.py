"""
Request and response schemas for the HTTP API.

Incoming bodies are validated here before any field is trusted. Unknown keys in
an update body are ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError


class PhotoUpdate(BaseModel):
    """Mutable fields of a photo record."""

    model_config = ConfigDict(extra="ignore", strict=True)

    title: str | None = None
    description: str | None = None

    @classmethod
    def parse_body(cls, body: Any) -> "PhotoUpdate":
        """
        Validate a decoded JSON body.

        Raises:
            ValidationError: If the body is not an object or a field has the wrong type
        """
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object", code="malformed_body")
        try:
            return cls.model_validate(body)
        except PydanticValidationError as e:
            fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise ValidationError(
                f"Invalid fields in request body: {', '.join(fields)}",
                code="malformed_body",
                details={"fields": fields},
                original_exception=e,
            ) from e
