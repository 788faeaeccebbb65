"""Shared schema helpers: payload validation and partial updates."""

import copy
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.config_service.core.exceptions import ValidationError, errors_to_field_map


def validate_payload[SchemaType: BaseModel](
    schema_cls: type[SchemaType], payload: Mapping[str, Any]
) -> SchemaType:
    """Validate a raw mapping against a request schema.

    Raises:
        ValidationError: With every violated field, not just the first one.
    """
    try:
        return schema_cls.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(errors_to_field_map(e.errors())) from e


class PartialUpdate(BaseModel):
    """Base for update requests where every field is independently optional.

    A field that is absent from the request is left untouched. A field sent as
    null clears the stored value when it is listed in CLEARABLE (free text,
    documents, tag lists); for plain scalar fields null is the same as absent.
    """

    CLEARABLE: ClassVar[dict[str, Any]] = {}

    def changes(self) -> dict[str, Any]:
        """Column changes requested by this update, keyed by model attribute."""
        result: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                if name in self.CLEARABLE:
                    result[name] = copy.deepcopy(self.CLEARABLE[name])
                continue
            result[name] = value
        return result
