"""Persisted post records and the site structure they live in."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from postdesk.models.blocks import AnyBlock
from postdesk.models.fields import FieldValue


# A region row is either a single field value (one-field regions) or a map
# of field id -> value (multi-field regions).
RegionValue = Union[FieldValue, dict[str, FieldValue]]

# Collection regions hold an ordered list of rows.
RegionData = Union[RegionValue, list[RegionValue]]


class RedirectType(str, Enum):
    """HTTP redirect kind used when a post has a redirect url."""

    PERMANENT = "permanent"
    TEMPORARY = "temporary"


class ContentState(str, Enum):
    """Lifecycle state of a post as seen by the editor.

    Never stored; see PostService.get_state.
    """

    NEW = "new"
    DRAFT = "draft"
    UNPUBLISHED = "unpublished"
    PUBLISHED = "published"


class Taxonomy(BaseModel):
    """Category or tag label. Identified by title when posts are written."""

    id: Optional[str] = None
    title: Optional[str] = None
    slug: Optional[str] = None


class Site(BaseModel):
    """A site hosting archive pages."""

    id: str
    title: str
    is_default: bool = False


class ArchivePage(BaseModel):
    """A page that lists posts (a blog)."""

    id: str
    site_id: str
    title: str
    slug: str


class DynamicPost(BaseModel):
    """A post whose regions follow a runtime content type."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    archive_id: Optional[str] = Field(default=None, description="Id of the archive page owning the post")
    type_id: str = Field(..., description="Content type id")
    title: str = ""
    slug: str = ""
    meta_keywords: Optional[str] = None
    meta_description: Optional[str] = None
    published: Optional[datetime] = Field(default=None, description="Naive local publish timestamp")
    redirect_url: Optional[str] = None
    redirect_type: RedirectType = RedirectType.PERMANENT
    category: Optional[Taxonomy] = None
    tags: list[Taxonomy] = Field(default_factory=list)
    regions: dict[str, RegionData] = Field(
        default_factory=dict,
        description="Region id -> row (single regions) or list of rows (collection regions)"
    )
    blocks: list[AnyBlock] = Field(default_factory=list)
    created: Optional[datetime] = Field(default=None, description="Set by the repository on first save")
    last_modified: Optional[datetime] = None

    model_config = {"frozen": False}
