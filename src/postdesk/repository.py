"""Content repository: sites, archive pages, posts, drafts and taxonomies.

ContentRepository is the async interface the post service depends on.
JsonContentRepository is a reference implementation that keeps everything
in memory and, when given a path, persists to a single JSON file after every
write.

Repositories hand out deep copies. Callers may mutate what they get back
freely; nothing changes in the store until save/save_draft is called.
"""

import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from postdesk.models.post import ArchivePage, DynamicPost, Site, Taxonomy
from postdesk.utils.logging import get_logger


logger = get_logger(__name__)

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_DASH_RE = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """Turn a title into a url slug ("Hello, World!" -> "hello-world")."""
    slug = _SLUG_STRIP_RE.sub("", text.lower())
    return _SLUG_DASH_RE.sub("-", slug).strip("-")


class ContentRepository(ABC):
    """Abstract interface for content persistence."""

    @abstractmethod
    async def get_default_site(self) -> Optional[Site]:
        """Return the default site, or None if there are no sites."""
        pass

    @abstractmethod
    async def get_sites(self) -> list[Site]:
        """Return all sites."""
        pass

    @abstractmethod
    async def get_archives(self, site_id: str) -> list[ArchivePage]:
        """Return the archive pages (blogs) of a site."""
        pass

    @abstractmethod
    async def get_posts(self, archive_id: str) -> list[DynamicPost]:
        """Return the live posts of an archive."""
        pass

    @abstractmethod
    async def get_post_by_id(self, post_id: str) -> Optional[DynamicPost]:
        """Return the live version of a post, or None."""
        pass

    @abstractmethod
    async def get_draft_by_id(self, post_id: str) -> Optional[DynamicPost]:
        """Return the pending draft of a post, or None if it has none."""
        pass

    @abstractmethod
    async def get_categories(self, archive_id: str) -> list[Taxonomy]:
        """Return the categories used in an archive."""
        pass

    @abstractmethod
    async def get_tags(self, archive_id: str) -> list[Taxonomy]:
        """Return the tags used in an archive."""
        pass

    @abstractmethod
    async def save(self, post: DynamicPost) -> None:
        """Save a post as its live version, discarding any pending draft."""
        pass

    @abstractmethod
    async def save_draft(self, post: DynamicPost) -> None:
        """Save a post as a draft revision."""
        pass

    @abstractmethod
    async def delete(self, post_id: str) -> None:
        """Delete a post and its draft. Unknown ids are ignored."""
        pass


class _StoreData(BaseModel):
    """Internal wrapper for JSON serialization."""

    sites: list[Site] = Field(default_factory=list)
    archives: list[ArchivePage] = Field(default_factory=list)
    posts: list[DynamicPost] = Field(default_factory=list)
    drafts: list[DynamicPost] = Field(default_factory=list)
    categories: dict[str, list[Taxonomy]] = Field(default_factory=dict)
    tags: dict[str, list[Taxonomy]] = Field(default_factory=dict)


class JsonContentRepository(ContentRepository):
    """In-memory content repository with optional JSON file persistence.

    Loads the store file on init (if a path is given) and saves after every
    mutation.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._data = self._load()

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _StoreData:
        if self._path is None or not self._path.exists():
            return _StoreData()
        return _StoreData.model_validate_json(self._path.read_text(encoding="utf-8"))

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._data.model_dump_json(indent=2),
            encoding="utf-8",
        )

    @staticmethod
    def _find(posts: list[DynamicPost], post_id: str) -> Optional[DynamicPost]:
        for post in posts:
            if post.id == post_id:
                return post
        return None

    def _resolve_taxonomy(self, pool: list[Taxonomy], taxonomy: Taxonomy) -> Taxonomy:
        """Match a taxonomy against an archive's pool by title, adding it if new."""
        for existing in pool:
            if existing.title == taxonomy.title:
                return existing.model_copy()
        created = Taxonomy(
            id=str(uuid.uuid4()),
            title=taxonomy.title,
            slug=slugify(taxonomy.title or ""),
        )
        pool.append(created)
        return created.model_copy()

    def _resolve_taxonomies(self, post: DynamicPost) -> None:
        archive_id = post.archive_id or ""
        if post.category is not None and post.category.title:
            categories = self._data.categories.setdefault(archive_id, [])
            post.category = self._resolve_taxonomy(categories, post.category)
        tags = self._data.tags.setdefault(archive_id, [])
        post.tags = [self._resolve_taxonomy(tags, tag) for tag in post.tags if tag.title]

    def _prepare(self, post: DynamicPost) -> DynamicPost:
        stored = post.model_copy(deep=True)
        now = datetime.now()
        if stored.created is None:
            stored.created = now
        stored.last_modified = now
        if not stored.slug:
            stored.slug = slugify(stored.title)
        self._resolve_taxonomies(stored)
        return stored

    # ── Site structure ───────────────────────────────────────────

    def add_site(self, site: Site) -> None:
        """Insert or replace a site."""
        self._data.sites = [s for s in self._data.sites if s.id != site.id]
        self._data.sites.append(site)
        self._save()

    def add_archive(self, archive: ArchivePage) -> None:
        """Insert or replace an archive page."""
        self._data.archives = [a for a in self._data.archives if a.id != archive.id]
        self._data.archives.append(archive)
        self._save()

    # ── Read operations ──────────────────────────────────────────

    async def get_default_site(self) -> Optional[Site]:
        for site in self._data.sites:
            if site.is_default:
                return site.model_copy()
        if self._data.sites:
            return self._data.sites[0].model_copy()
        return None

    async def get_sites(self) -> list[Site]:
        return [site.model_copy() for site in self._data.sites]

    async def get_archives(self, site_id: str) -> list[ArchivePage]:
        return [a.model_copy() for a in self._data.archives if a.site_id == site_id]

    async def get_posts(self, archive_id: str) -> list[DynamicPost]:
        return [
            post.model_copy(deep=True)
            for post in self._data.posts
            if post.archive_id == archive_id
        ]

    async def get_post_by_id(self, post_id: str) -> Optional[DynamicPost]:
        post = self._find(self._data.posts, post_id)
        return post.model_copy(deep=True) if post is not None else None

    async def get_draft_by_id(self, post_id: str) -> Optional[DynamicPost]:
        draft = self._find(self._data.drafts, post_id)
        return draft.model_copy(deep=True) if draft is not None else None

    async def get_categories(self, archive_id: str) -> list[Taxonomy]:
        return [c.model_copy() for c in self._data.categories.get(archive_id, [])]

    async def get_tags(self, archive_id: str) -> list[Taxonomy]:
        return [t.model_copy() for t in self._data.tags.get(archive_id, [])]

    # ── Write operations ─────────────────────────────────────────

    async def save(self, post: DynamicPost) -> None:
        stored = self._prepare(post)
        self._data.posts = [p for p in self._data.posts if p.id != stored.id]
        self._data.posts.append(stored)
        self._data.drafts = [d for d in self._data.drafts if d.id != stored.id]
        self._save()
        logger.debug("post_stored", post_id=stored.id, archive_id=stored.archive_id)

    async def save_draft(self, post: DynamicPost) -> None:
        """Save a draft revision.

        Drafts only exist for published posts. A post that has no live
        version yet, or whose live version is unpublished, is saved directly.
        """
        live = self._find(self._data.posts, post.id)
        if live is None or live.published is None:
            await self.save(post)
            return

        stored = self._prepare(post)
        stored.created = live.created
        self._data.drafts = [d for d in self._data.drafts if d.id != stored.id]
        self._data.drafts.append(stored)
        self._save()
        logger.debug("draft_stored", post_id=stored.id, archive_id=stored.archive_id)

    async def delete(self, post_id: str) -> None:
        self._data.posts = [p for p in self._data.posts if p.id != post_id]
        self._data.drafts = [d for d in self._data.drafts if d.id != post_id]
        self._save()
