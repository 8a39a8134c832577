from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProductReviewModel(BaseModel):
    id: int
    header: str
    content: str
    date: datetime
    product_id: int
    is_hidden: bool

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )


class ProductReviewCreateModel(BaseModel):
    """Body of a create request. id, date and isHidden are server-assigned
    and dropped if a client sends them."""
    header: str = Field(min_length=1)
    content: str = Field(min_length=1)
    product_id: int = Field(ge=1)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )


class ProductReviewUpdateModel(BaseModel):
    is_hidden: bool

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="forbid"
    )


class PatchOperation(BaseModel):
    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str
    value: Optional[Any] = None
    from_: Optional[str] = Field(default=None, alias="from")

    model_config = ConfigDict(populate_by_name=True)

    def to_patch_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)
