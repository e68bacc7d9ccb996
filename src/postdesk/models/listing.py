"""Read-only models for the post picker and the archive post list."""

from typing import Optional

from pydantic import BaseModel, Field

from postdesk.models.post import ContentState


class SiteItem(BaseModel):
    id: str
    title: str


class ArchiveItem(BaseModel):
    id: str
    title: str
    slug: str


class PostPickerItem(BaseModel):
    id: str
    title: str
    permalink: str
    published: Optional[str] = None


class ArchiveMapModel(BaseModel):
    """Sites, archives and posts for the post picker dialog."""

    site_id: Optional[str] = None
    site_title: Optional[str] = None
    archive_id: Optional[str] = None
    archive_title: Optional[str] = None
    archive_slug: Optional[str] = None
    sites: list[SiteItem] = Field(default_factory=list)
    archives: list[ArchiveItem] = Field(default_factory=list)
    posts: list[PostPickerItem] = Field(default_factory=list)


class PostTypeItem(BaseModel):
    id: str
    title: str
    add_url: str


class PostListItem(BaseModel):
    id: str
    title: str
    type_name: str
    category: Optional[str] = None
    published: Optional[str] = None
    status: ContentState
    is_scheduled: bool = False
    edit_url: str


class CategoryItem(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None


class PostListModel(BaseModel):
    """Posts of one archive, with the post types that can be added to it."""

    post_types: list[PostTypeItem] = Field(default_factory=list)
    posts: list[PostListItem] = Field(default_factory=list)
    categories: list[CategoryItem] = Field(default_factory=list)
