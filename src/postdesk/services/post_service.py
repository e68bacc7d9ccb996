"""Post editing service.

Turns stored posts into edit models for the manager UI and writes edited
models back. Every operation is one read and/or one write against the
content repository; everything in between happens on request-local copies.
"""

import uuid
from datetime import datetime
from typing import Optional

from postdesk.factory import ContentFactory
from postdesk.models.edit_model import EditModel
from postdesk.models.listing import (
    ArchiveItem,
    ArchiveMapModel,
    CategoryItem,
    PostListItem,
    PostListModel,
    PostPickerItem,
    PostTypeItem,
    SiteItem,
)
from postdesk.models.post import ContentState, DynamicPost, Taxonomy
from postdesk.registry import SchemaRegistry
from postdesk.repository import ContentRepository
from postdesk.services.exceptions import NotFoundError, ParseError, ValidationError
from postdesk.services.transform import (
    blocks_from_model,
    blocks_to_model,
    editors_to_model,
    region_from_model,
    region_to_model,
)
from postdesk.utils.logging import get_logger


logger = get_logger(__name__)

PUBLISHED_FORMAT = "%Y-%m-%d %H:%M"
ADD_URL = "manager/post/add/"
EDIT_URL = "manager/post/edit/"


def format_published(published: Optional[datetime]) -> Optional[str]:
    """Render a publish timestamp the way the editor shows it."""
    return published.strftime(PUBLISHED_FORMAT) if published is not None else None


def parse_published(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an edited publish date into a naive local timestamp.

    Accepts "YYYY-MM-DD HH:MM" as well as any other ISO 8601 form. Offsets
    are converted to local time. Empty input means "not published".

    Args:
        value: Date string from the editor

    Returns:
        Naive local datetime, or None when empty

    Raises:
        ParseError: If the string is not a valid date-time
    """
    if value is None or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ParseError(value) from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def get_state(post: DynamicPost, is_draft: bool) -> ContentState:
    """
    Compute the lifecycle state of a post.

    Args:
        post: The post (live version or draft)
        is_draft: Whether the post was loaded through the draft path

    Returns:
        NEW for posts never saved, UNPUBLISHED for saved posts without a
        publish date, otherwise DRAFT or PUBLISHED depending on is_draft
    """
    if post.created is None:
        return ContentState.NEW
    if post.published is None:
        return ContentState.UNPUBLISHED
    if is_draft:
        return ContentState.DRAFT
    return ContentState.PUBLISHED


class PostService:
    """
    Read and write posts through edit models.

    Example:
        >>> service = PostService(repository, registry, factory)
        >>> model = await service.get_by_id(post_id)
        >>> model.title = "New title"
        >>> await service.save(model, is_draft=True)
    """

    def __init__(
        self,
        repository: ContentRepository,
        registry: SchemaRegistry,
        factory: ContentFactory,
    ):
        """
        Initialize the service.

        Args:
            repository: Where posts, sites and taxonomies are stored
            registry: Content, field and block type lookups
            factory: Builds new posts and block groups
        """
        self.repository = repository
        self.registry = registry
        self.factory = factory

    # ── Picker and list views ────────────────────────────────────

    async def get_archive_map(
        self,
        site_id: Optional[str] = None,
        archive_id: Optional[str] = None,
    ) -> ArchiveMapModel:
        """
        Collect sites, archives and posts for the post picker.

        Args:
            site_id: Selected site (default site when None)
            archive_id: Selected archive (first archive of the site when None)

        Returns:
            ArchiveMapModel; unpublished posts are listed first
        """
        model = ArchiveMapModel()

        if site_id is None:
            site = await self.repository.get_default_site()
            if site is None:
                return model
            site_id = site.id
        model.site_id = site_id

        sites = await self.repository.get_sites()
        model.sites = sorted(
            (SiteItem(id=s.id, title=s.title) for s in sites),
            key=lambda s: s.title,
        )
        for site_item in model.sites:
            if site_item.id == site_id:
                model.site_title = site_item.title

        archives = await self.repository.get_archives(site_id)
        model.archives = sorted(
            (ArchiveItem(id=a.id, title=a.title, slug=a.slug) for a in archives),
            key=lambda a: a.title,
        )
        if not model.archives:
            return model

        if archive_id is None:
            archive_id = model.archives[0].id
        for archive in model.archives:
            if archive.id == archive_id:
                model.archive_id = archive.id
                model.archive_title = archive.title
                model.archive_slug = archive.slug

        posts = [
            PostPickerItem(
                id=post.id,
                title=post.title,
                permalink=f"/{model.archive_slug or ''}/{post.slug}",
                published=format_published(post.published),
            )
            for post in await self.repository.get_posts(archive_id)
        ]
        model.posts = (
            [p for p in posts if not p.published]
            + [p for p in posts if p.published]
        )
        return model

    async def get_list(self, archive_id: str) -> PostListModel:
        """
        List the posts and categories of an archive.

        Args:
            archive_id: Archive page id

        Returns:
            PostListModel with every registered post type
        """
        model = PostListModel(post_types=[
            PostTypeItem(id=t.id, title=t.title, add_url=ADD_URL)
            for t in self.registry.content_types
        ])
        type_names = {t.id: t.title for t in model.post_types}
        now = datetime.now()

        for post in await self.repository.get_posts(archive_id):
            model.posts.append(PostListItem(
                id=post.id,
                title=post.title,
                type_name=type_names.get(post.type_id, post.type_id),
                category=post.category.title if post.category else None,
                published=format_published(post.published),
                status=get_state(post, False),
                is_scheduled=post.published is not None and post.published > now,
                edit_url=EDIT_URL,
            ))

        model.categories = [
            CategoryItem(id=c.id, title=c.title)
            for c in await self.repository.get_categories(archive_id)
        ]
        return model

    # ── Edit models ──────────────────────────────────────────────

    async def get_by_id(self, post_id: str, use_draft: bool = True) -> Optional[EditModel]:
        """
        Load the edit model of a post.

        Args:
            post_id: Post id
            use_draft: Prefer the pending draft over the live version

        Returns:
            EditModel, or None if the post doesn't exist
        """
        is_draft = True
        post = await self.repository.get_draft_by_id(post_id) if use_draft else None

        if post is None:
            post = await self.repository.get_post_by_id(post_id)
            is_draft = False

        if post is None:
            logger.info("post_not_found", post_id=post_id)
            return None

        model = self.transform(post, is_draft)
        await self._attach_taxonomies(model, post)
        logger.debug("post_loaded", post_id=post_id, draft=is_draft, state=model.state.value)
        return model

    async def create(self, archive_id: str, type_id: str) -> Optional[EditModel]:
        """
        Build the edit model of a new, unsaved post.

        Args:
            archive_id: Archive the post will belong to
            type_id: Content type id

        Returns:
            EditModel, or None if the content type is unknown
        """
        content_type = self.registry.get_content_type(type_id)
        if content_type is None:
            logger.info("post_type_not_found", type_id=type_id)
            return None

        post = self.factory.create_post(content_type)
        post.id = str(uuid.uuid4())
        post.archive_id = archive_id

        model = self.transform(post, False)
        await self._attach_taxonomies(model, post)
        return model

    def transform(self, post: DynamicPost, is_draft: bool) -> EditModel:
        """
        Build the edit model of a post.

        Args:
            post: Stored post
            is_draft: Whether the post came from the draft path

        Returns:
            EditModel without archive categories/tags attached

        Raises:
            NotFoundError: If the post's content type or one of its field
                types is not registered
        """
        content_type = self.registry.get_content_type(post.type_id)
        if content_type is None:
            raise NotFoundError("content_type", post.type_id)

        model = EditModel(
            id=post.id,
            archive_id=post.archive_id,
            type_id=post.type_id,
            title=post.title,
            slug=post.slug,
            meta_keywords=post.meta_keywords,
            meta_description=post.meta_description,
            published=format_published(post.published),
            redirect_url=post.redirect_url,
            redirect_type=post.redirect_type,
            state=get_state(post, is_draft),
            use_blocks=content_type.use_blocks,
        )

        for region in content_type.regions:
            model.regions.append(region_to_model(
                region,
                post.regions.get(region.id),
                self.registry,
                self.factory,
            ))

        model.blocks = blocks_to_model(post.blocks, self.registry)
        model.editors = editors_to_model(content_type)
        return model

    async def _attach_taxonomies(self, model: EditModel, post: DynamicPost) -> None:
        archive_id = post.archive_id or ""
        model.categories = [c.title for c in await self.repository.get_categories(archive_id)]
        model.tags = [t.title for t in await self.repository.get_tags(archive_id)]
        model.selected_category = post.category.title if post.category else None
        model.selected_tags = [t.title for t in post.tags]

    # ── Writes ───────────────────────────────────────────────────

    async def save(self, model: EditModel, is_draft: bool) -> None:
        """
        Write an edit model back to its post and persist it.

        Args:
            model: Edited model (its id is filled in when empty)
            is_draft: Save as draft instead of publishing

        Raises:
            ValidationError: If the content type is not registered
            NotFoundError: If the model lacks a region, region item or field
                the content type declares
            ParseError: If the publish date is invalid
        """
        content_type = self.registry.get_content_type(model.type_id)
        if content_type is None:
            logger.error("post_save_rejected", post_id=model.id, type_id=model.type_id)
            raise ValidationError("Invalid post type")

        if not model.id:
            model.id = str(uuid.uuid4())

        post = await self.repository.get_post_by_id(model.id)
        if post is None:
            post = self.factory.create_post(content_type)
            post.id = model.id

        post.archive_id = model.archive_id
        post.type_id = model.type_id
        post.title = model.title
        post.slug = model.slug
        post.meta_keywords = model.meta_keywords
        post.meta_description = model.meta_description
        post.published = parse_published(model.published)
        post.redirect_url = model.redirect_url
        post.redirect_type = model.redirect_type

        post.category = Taxonomy(title=model.selected_category) if model.selected_category else None
        post.tags = [Taxonomy(title=tag) for tag in model.selected_tags]

        for region in content_type.regions:
            region_from_model(region, model.get_region(region.id), post.regions)

        post.blocks = blocks_from_model(model.blocks, self.registry, self.factory)

        if is_draft:
            await self.repository.save_draft(post)
        else:
            await self.repository.save(post)

        logger.info("post_saved", post_id=post.id, type_id=post.type_id, draft=is_draft)

    async def delete(self, post_id: str) -> None:
        """Delete a post and any pending draft."""
        await self.repository.delete(post_id)
        logger.info("post_deleted", post_id=post_id)
