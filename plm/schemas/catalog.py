"""Material and attribute catalog schemas."""

from pydantic import BaseModel, Field


class MaterialCreate(BaseModel):
    name: str = Field(max_length=200, description="Trimmed; 1-100 characters")

    model_config = {"extra": "forbid"}


class MaterialResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class AttributeCreate(BaseModel):
    name: str = Field(max_length=500, description="Whitespace collapsed; 1-100 characters")

    model_config = {"extra": "forbid"}


class AttributeResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class IncompatibilityCreate(BaseModel):
    """Unordered pair of attributes that may not share a garment."""

    attribute_id_1: int
    attribute_id_2: int

    model_config = {"extra": "forbid"}


class IncompatibilityResponse(BaseModel):
    created: bool = Field(description="False when the pair was already recorded")
    message: str


class CompatibilityCheckRequest(BaseModel):
    attribute_ids: list[int] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class CompatibilityCheckResponse(BaseModel):
    valid: bool
    conflicts: list[tuple[str, str]] = Field(default_factory=list)
