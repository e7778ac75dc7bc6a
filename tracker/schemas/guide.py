"""Guide assistant schemas."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from tracker.schemas.common import BaseSchema


class GuideQuestion(BaseSchema):
    """Question about the in-game settings menu."""

    question: str = Field(default="", max_length=1000)
    class_name: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("className", "class_name"),
    )
    tab_name: Optional[str] = Field(
        default=None,
        max_length=100,
        validation_alias=AliasChoices("tabName", "tab_name"),
    )


class GuideAnswer(BaseModel):
    """Generated answer."""

    answer: str
