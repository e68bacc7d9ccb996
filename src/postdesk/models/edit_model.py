"""Editor-facing projection of a post.

An EditModel is rebuilt from the stored post on every read and thrown away
after every write. Field and block values are carried as their typed models,
so writing them back needs no conversion.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from postdesk.models.blocks import Block, BlockGroup
from postdesk.models.fields import FieldValue
from postdesk.models.post import ContentState, RedirectType


EMPTY_TITLE = "..."


class FieldMeta(BaseModel):
    """How the editor should render one field."""

    id: str
    name: Optional[str] = None
    component: str
    placeholder: Optional[str] = None
    description: Optional[str] = None
    is_half_width: bool = False
    notify_change: bool = Field(
        default=False,
        description="Editor re-renders the row title when this field changes"
    )
    options: dict[int, str] = Field(default_factory=dict)


class FieldModel(BaseModel):
    """A field value together with its editor metadata."""

    meta: FieldMeta
    value: FieldValue


class RegionMeta(BaseModel):
    """Editor metadata for a region."""

    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    placeholder: Optional[str] = None
    is_collection: bool = False
    icon: Optional[str] = None
    display: str = "vertical"


class RegionItemModel(BaseModel):
    """One row of a region: exactly one for single regions."""

    title: str = EMPTY_TITLE
    fields: list[FieldModel] = Field(default_factory=list)


class RegionModel(BaseModel):
    """A region with its ordered rows."""

    meta: RegionMeta
    items: list[RegionItemModel] = Field(default_factory=list)


class BlockMeta(BaseModel):
    """Editor metadata for a block."""

    name: str
    title: Optional[str] = None
    icon: Optional[str] = None
    component: str
    is_group: bool = False


class BlockItemModel(BaseModel):
    """A simple block in the editor tree."""

    kind: Literal["item"] = "item"
    is_active: bool = False
    meta: BlockMeta
    value: Block


class BlockGroupModel(BaseModel):
    """A block group in the editor tree, with its fields and children."""

    kind: Literal["group"] = "group"
    id: str
    type: str
    meta: BlockMeta
    fields: list[FieldModel] = Field(default_factory=list)
    items: list[BlockItemModel] = Field(default_factory=list)


BlockNode = Annotated[Union[BlockItemModel, BlockGroupModel], Field(discriminator="kind")]


class EditorModel(BaseModel):
    """Custom editor tab contributed by the content type. Display only."""

    component: str
    icon: Optional[str] = None
    name: str


class EditModel(BaseModel):
    """Everything the editor needs to render and save a post."""

    id: Optional[str] = Field(default=None, description="Post id; a new one is assigned on save when empty")
    archive_id: Optional[str] = None
    type_id: str
    title: str = ""
    slug: str = ""
    meta_keywords: Optional[str] = None
    meta_description: Optional[str] = None
    published: Optional[str] = Field(
        default=None,
        description="Publish date-time as 'YYYY-MM-DD HH:MM' (empty or None when unpublished)"
    )
    redirect_url: Optional[str] = None
    redirect_type: RedirectType = RedirectType.PERMANENT
    state: ContentState = ContentState.NEW
    use_blocks: bool = True

    regions: list[RegionModel] = Field(default_factory=list)
    blocks: list[BlockNode] = Field(default_factory=list)
    editors: list[EditorModel] = Field(default_factory=list)

    categories: list[str] = Field(default_factory=list, description="Category titles available in the archive")
    tags: list[str] = Field(default_factory=list, description="Tag titles available in the archive")
    selected_category: Optional[str] = None
    selected_tags: list[str] = Field(default_factory=list)

    model_config = {"frozen": False}

    def get_region(self, region_id: str) -> Optional[RegionModel]:
        """Return the region model with the given id, or None."""
        for region in self.regions:
            if region.meta.id == region_id:
                return region
        return None
