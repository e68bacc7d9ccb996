"""Schema descriptors served by the type registry.

These describe the *shape* of posts and blocks: which regions a content
type has, which fields each region holds, and how field and block types are
presented by the editor.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RegionDisplayMode(str, Enum):
    """How the fields of a region are laid out in the editor."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class BlockDisplayMode(str, Enum):
    """How a block group presents its child blocks."""

    MASTER_DETAIL = "master_detail"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class FieldDescriptor(BaseModel):
    """One field declared on a region (or on a block group)."""

    id: str = Field(..., description="Field id, unique within its region")
    type: str = Field(..., description="Field type id, resolved through the registry")
    title: Optional[str] = Field(default=None, description="Label shown in the editor")
    placeholder: Optional[str] = None
    description: Optional[str] = None
    half_width: bool = Field(default=False, description="Render at half width")

    model_config = {"frozen": True}


class RegionDescriptor(BaseModel):
    """A named slot of one or more fields on a content type."""

    id: str = Field(..., description="Region id, key into the post region map")
    title: Optional[str] = None
    description: Optional[str] = None
    list_title_placeholder: Optional[str] = Field(
        default=None,
        description="Placeholder shown for collection rows without a title"
    )
    collection: bool = Field(default=False, description="Whether the region repeats")
    fields: list[FieldDescriptor] = Field(default_factory=list)
    list_title_field: Optional[str] = Field(
        default=None,
        description="Id of the field whose value titles each row of a multi-field region"
    )
    display: RegionDisplayMode = RegionDisplayMode.VERTICAL
    icon: Optional[str] = None

    model_config = {"frozen": True}


class CustomEditorDescriptor(BaseModel):
    """Extra editor tab a content type contributes to the UI."""

    component: str
    icon: Optional[str] = None
    title: str

    model_config = {"frozen": True}


class ContentTypeDescriptor(BaseModel):
    """Runtime definition of a post type."""

    id: str
    title: str
    regions: list[RegionDescriptor] = Field(default_factory=list)
    custom_editors: list[CustomEditorDescriptor] = Field(default_factory=list)
    use_blocks: bool = Field(default=True, description="Whether posts of this type have a block body")

    model_config = {"frozen": True}

    def get_region(self, region_id: str) -> Optional[RegionDescriptor]:
        """Return the region with the given id, or None."""
        for region in self.regions:
            if region.id == region_id:
                return region
        return None


class FieldTypeInfo(BaseModel):
    """Registry entry for a field type."""

    type: str = Field(..., description="Field type id")
    kind: str = Field(..., description="Concrete field value kind (see models.fields)")
    component: str = Field(..., description="Editor component rendering the field")
    options: Optional[dict[int, str]] = Field(
        default=None,
        description="Selectable option set (value -> label); None if not selectable"
    )

    model_config = {"frozen": True}

    @property
    def is_selectable(self) -> bool:
        return self.options is not None


class BlockTypeInfo(BaseModel):
    """Registry entry for a block type."""

    type: str
    name: str
    icon: Optional[str] = None
    component: str = "block"
    is_group: bool = False
    display: BlockDisplayMode = BlockDisplayMode.MASTER_DETAIL
    fields: list[FieldDescriptor] = Field(
        default_factory=list,
        description="Fields the block itself carries (group-level fields for groups)"
    )

    model_config = {"frozen": True}
