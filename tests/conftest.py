"""Shared test fixtures for all test modules."""

from datetime import datetime

import pytest
import pytest_asyncio

from postdesk.factory import DefaultContentFactory
from postdesk.models.blocks import Block, BlockGroup
from postdesk.models.fields import (
    HtmlField,
    ImageField,
    SelectField,
    StringField,
    TextField,
)
from postdesk.models.post import ArchivePage, DynamicPost, Site, Taxonomy
from postdesk.registry import SchemaRegistry
from postdesk.repository import JsonContentRepository
from postdesk.services.post_service import PostService


SCHEMA = {
    "field_types": [
        {
            "type": "priority",
            "kind": "select",
            "component": "select-field",
            "options": {1: "Low", 2: "Normal", 3: "High"},
        },
    ],
    "block_types": [
        {
            "type": "html",
            "name": "Content",
            "icon": "fas fa-paragraph",
            "component": "html-block",
            "fields": [{"id": "body", "type": "html"}],
        },
        {
            "type": "quote",
            "name": "Quote",
            "icon": "fas fa-quote-right",
            "component": "quote-block",
            "fields": [{"id": "author", "type": "string"}, {"id": "body", "type": "text"}],
        },
        {
            "type": "columns",
            "name": "Columns",
            "icon": "fas fa-columns",
            "is_group": True,
            "display": "horizontal",
            "fields": [{"id": "heading", "type": "string"}],
        },
        {
            "type": "gallery",
            "name": "Gallery",
            "icon": "fas fa-images",
            "is_group": True,
            "display": "master_detail",
        },
    ],
    "content_types": [
        {
            "id": "article",
            "title": "Article",
            "regions": [
                {
                    "id": "hero",
                    "title": "Hero",
                    "fields": [
                        {"id": "heading", "type": "string", "title": "Heading"},
                        {"id": "image", "type": "image", "title": "Image", "half_width": True},
                        {"id": "priority", "type": "priority", "title": "Priority"},
                    ],
                    "list_title_field": "heading",
                    "display": "horizontal",
                },
                {
                    "id": "intro",
                    "title": "Introduction",
                    "fields": [{"id": "default", "type": "text", "placeholder": "Write an intro"}],
                },
                {
                    "id": "links",
                    "title": "Links",
                    "collection": True,
                    "list_title_placeholder": "New link",
                    "fields": [{"id": "default", "type": "string"}],
                },
                {
                    "id": "facts",
                    "title": "Facts",
                    "collection": True,
                    "icon": "fas fa-list",
                    "fields": [
                        {"id": "label", "type": "string"},
                        {"id": "detail", "type": "text"},
                    ],
                    "list_title_field": "label",
                },
            ],
            "custom_editors": [
                {"component": "seo-editor", "icon": "fas fa-search", "title": "SEO"},
            ],
        },
        {
            "id": "news",
            "title": "News",
            "use_blocks": False,
            "regions": [
                {"id": "summary", "fields": [{"id": "default", "type": "markdown"}]},
            ],
        },
    ],
}

SITE_ID = "site-1"
ARCHIVE_ID = "blog-1"


@pytest.fixture
def registry():
    """Registry loaded with the article and news content types."""
    registry = SchemaRegistry()
    registry.load(SCHEMA)
    return registry


@pytest.fixture
def factory(registry):
    """Default factory over the test registry."""
    return DefaultContentFactory(registry)


@pytest.fixture
def repository():
    """In-memory repository with one site and one archive page."""
    repository = JsonContentRepository()
    repository.add_site(Site(id=SITE_ID, title="Main site", is_default=True))
    repository.add_archive(ArchivePage(id=ARCHIVE_ID, site_id=SITE_ID, title="Blog", slug="blog"))
    return repository


@pytest.fixture
def service(repository, registry, factory):
    """PostService over the in-memory repository."""
    return PostService(repository, registry, factory)


def make_article(post_id: str = "post-1") -> DynamicPost:
    """Build a fully populated, never-saved article."""
    return DynamicPost(
        id=post_id,
        archive_id=ARCHIVE_ID,
        type_id="article",
        title="Hello world",
        slug="hello-world",
        meta_keywords="hello",
        meta_description="A first post",
        published=datetime(2024, 1, 15, 10, 30),
        redirect_url=None,
        category=Taxonomy(title="News"),
        tags=[Taxonomy(title="python"), Taxonomy(title="cms")],
        regions={
            "hero": {
                "heading": StringField(value="Welcome"),
                "image": ImageField(media_id="m-1", filename="hero.png"),
                "priority": SelectField(value=2),
            },
            "intro": TextField(value="Short introduction"),
            "links": [
                StringField(value="https://example.com/a"),
                StringField(value="https://example.com/b"),
                StringField(value=None),
            ],
            "facts": [
                {"label": StringField(value="Founded"), "detail": TextField(value="1999")},
                {"label": StringField(value=""), "detail": TextField(value="Unlabelled")},
            ],
        },
        blocks=[
            Block(id="b-1", type="html", fields={"body": HtmlField(value="<p>First paragraph</p>")}),
            BlockGroup(
                id="g-1",
                type="columns",
                fields={"heading": StringField(value="Two columns")},
                items=[
                    Block(id="b-2", type="html", fields={"body": HtmlField(value="<p>Left</p>")}),
                    Block(
                        id="b-3",
                        type="quote",
                        fields={"author": StringField(value="Ada"), "body": TextField(value="Right")},
                    ),
                ],
            ),
            Block(id="b-4", type="quote", fields={"author": StringField(value="Grace")}),
        ],
    )


@pytest.fixture
def article():
    """A populated article that has not been saved yet."""
    return make_article()


@pytest_asyncio.fixture
async def saved_article(repository):
    """The sample article saved (published) in the repository."""
    post = make_article()
    await repository.save(post)
    return await repository.get_post_by_id(post.id)
