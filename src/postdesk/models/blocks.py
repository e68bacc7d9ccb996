"""Content blocks stored in a post body."""

import uuid
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from postdesk.models.fields import FieldValue


def _new_id() -> str:
    return str(uuid.uuid4())


def _first_title(fields: dict) -> Optional[str]:
    for value in fields.values():
        title = value.get_title()
        if title:
            return title
    return None


class Block(BaseModel):
    """A simple block: a typed bag of field values keyed by field id."""

    kind: Literal["block"] = "block"
    id: str = Field(default_factory=_new_id)
    type: str = Field(..., description="Block type id, resolved through the registry")
    fields: dict[str, FieldValue] = Field(default_factory=dict)

    model_config = {"frozen": False}

    def get_title(self) -> Optional[str]:
        """Title of the first field that has one."""
        return _first_title(self.fields)


class BlockGroup(BaseModel):
    """A block that holds an ordered list of child blocks.

    Groups carry their own field values (shared by all children) and never
    nest other groups.
    """

    kind: Literal["group"] = "group"
    id: str = Field(default_factory=_new_id)
    type: str
    fields: dict[str, FieldValue] = Field(default_factory=dict)
    items: list[Block] = Field(default_factory=list)

    model_config = {"frozen": False}

    def get_title(self) -> Optional[str]:
        return _first_title(self.fields)


AnyBlock = Annotated[Union[Block, BlockGroup], Field(discriminator="kind")]
