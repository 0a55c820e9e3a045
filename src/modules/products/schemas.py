"""Product schemas and the field rules applied to request bodies."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.errors import ErrorKind, PipelineError
from src.shared.validation import BoundOp, FieldRule, NumericBound, Schema, validate_fields

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1024

PRODUCT_SCHEMA: Schema = (
    FieldRule("name", value_type=str, required=True, max_length=NAME_MAX_LENGTH),
    FieldRule("description", value_type=str, max_length=DESCRIPTION_MAX_LENGTH),
    FieldRule("price", value_type=float, required=True, numeric_bound=NumericBound(BoundOp.GT, 0)),
)


class ProductPayload(BaseModel):
    """A validated product body; identity is assigned by the store."""

    name: str
    description: str = ""
    price: float


class ProductPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str = Field(serialization_alias="id")
    name: str
    description: str
    price: float


def validate_product(payload: Mapping[str, Any], schema: Schema = PRODUCT_SCHEMA) -> ProductPayload:
    """Validate a full product body (create and replace)."""
    return ProductPayload(**validate_fields(payload, schema))


def validate_product_patch(payload: Mapping[str, Any], schema: Schema = PRODUCT_SCHEMA) -> dict[str, Any]:
    """Validate a partial product body and return only the fields to change."""
    changes = validate_fields(payload, schema, partial=True)
    if not changes:
        raise PipelineError(ErrorKind.FIELD_REQUIRED, "no fields to update")
    return changes
