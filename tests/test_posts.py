"""Tests for post creation and publishing."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from blogue.config import BlogueConfig
from blogue.file_utils import read_post
from blogue.posts import (
    PostOptions,
    apply_overrides,
    create_post,
    get_post_meta,
    publish_post,
    unpublish_post,
)


@pytest.fixture
def config() -> BlogueConfig:
    return BlogueConfig(content_dir="src/content/blog", max_posts=10, default_author="")


def _write_post(path, frontmatter: str, body: str = "# Post\n\nBody.\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{frontmatter}\n---\n\n{body}", encoding="utf-8")
    return path


def _blog_posts(root, count: int = 3) -> None:
    for i in range(count):
        _write_post(
            root / "src" / "content" / "blog" / f"post-{i}.md",
            f'title: "Post {i}"\ndate: "2024-01-0{i + 1}"\ntags: [a]\ndraft: false',
        )


# --- Creating posts ---


class TestCreatePost:
    @pytest.mark.asyncio
    async def test_fallback_template(self, tmp_path, config):
        created = await create_post(
            PostOptions(title="Hello World", project_root=tmp_path), config
        )

        assert created.source == "fallback"
        assert created.path == tmp_path / "src" / "content" / "blog" / "hello-world.md"
        assert created.path.exists()
        assert list(created.frontmatter) == [
            "title",
            "date",
            "author",
            "description",
            "tags",
            "draft",
        ]
        assert created.frontmatter["title"] == "Hello World"
        assert created.frontmatter["draft"] is True
        assert created.reason in created.warnings

        metadata, body = read_post(created.path)
        assert metadata["title"] == "Hello World"
        assert "# Hello World" in body

    @pytest.mark.asyncio
    async def test_learned_pattern(self, tmp_path, config):
        _blog_posts(tmp_path)

        created = await create_post(
            PostOptions(title="Third Post", project_root=tmp_path, tags=["python"]), config
        )

        assert created.source == "pattern"
        assert list(created.frontmatter) == ["title", "date", "tags", "draft"]
        assert created.frontmatter["tags"] == ["python"]
        assert created.frontmatter["draft"] is True

        metadata, _ = read_post(created.path)
        # Existing posts quote their dates, so the new one does too
        assert isinstance(metadata["date"], str)
        assert metadata["tags"] == ["python"]

    @pytest.mark.asyncio
    async def test_schema_template(self, astro_project, config):
        created = await create_post(
            PostOptions(title="First Post", project_root=astro_project, draft=False), config
        )

        assert created.source == "schema"
        assert created.path == astro_project / "src" / "content" / "blog" / "first-post.md"
        assert list(created.frontmatter) == ["title", "description", "pubDate", "tags", "draft"]
        assert created.frontmatter["draft"] is False

        metadata, _ = read_post(created.path)
        assert isinstance(metadata["pubDate"], datetime)

    @pytest.mark.asyncio
    async def test_unparseable_schema_is_reported(self, astro_project, config):
        (astro_project / "src" / "content" / "config.ts").write_text("const = ;")

        created = await create_post(
            PostOptions(title="First Post", project_root=astro_project), config
        )

        assert created.source != "schema"
        assert created.path.exists()
        assert any(
            w.startswith("Astro schema not used: Failed to parse config") for w in created.warnings
        )

    @pytest.mark.asyncio
    async def test_named_collection(self, astro_project, config):
        created = await create_post(
            PostOptions(title="Ada Lovelace", project_root=astro_project, collection_name="authors"),
            config,
        )

        assert created.path == astro_project / "src" / "content" / "authors" / "ada-lovelace.md"
        assert created.frontmatter == {"name": "", "title": "Ada Lovelace"}

    @pytest.mark.asyncio
    async def test_unknown_collection(self, astro_project, config):
        created = await create_post(
            PostOptions(title="Post", project_root=astro_project, collection_name="missing"),
            config,
        )
        assert "Collection 'missing' not found, using defaults" in created.warnings
        assert created.path.parent == astro_project / "src" / "content" / "blog"

    @pytest.mark.asyncio
    async def test_explicit_content_dir(self, tmp_path, config):
        created = await create_post(
            PostOptions(title="Post", project_root=tmp_path, content_dir="posts"), config
        )
        assert created.path == tmp_path / "posts" / "post.md"

    @pytest.mark.asyncio
    async def test_default_author(self, tmp_path):
        config = BlogueConfig(default_author="Ada")
        created = await create_post(PostOptions(title="Post", project_root=tmp_path), config)
        assert created.frontmatter["author"] == "Ada"

    @pytest.mark.asyncio
    async def test_refuses_to_overwrite(self, tmp_path, config):
        options = PostOptions(title="Post", project_root=tmp_path)
        await create_post(options, config)

        with pytest.raises(FileExistsError):
            await create_post(options, config)

        options.overwrite = True
        created = await create_post(options, config)
        assert created.path.exists()

    @pytest.mark.asyncio
    async def test_untitled_slug(self, tmp_path, config):
        created = await create_post(PostOptions(title="!!!", project_root=tmp_path), config)
        assert created.path.name == "untitled.md"

    def test_title_is_required(self):
        with pytest.raises(ValidationError):
            PostOptions(title="")


class TestApplyOverrides:
    def test_user_values(self):
        template = {"title": "", "author": "", "tags": [], "draft": False}
        options = PostOptions(title="T", author="Ada", tags=["x"], description="About")

        result = apply_overrides(template, options)

        assert result == {
            "title": "T",
            "author": "Ada",
            "tags": ["x"],
            "draft": True,
            "description": "About",
        }
        assert template["title"] == ""

    def test_published_field_is_inverted(self):
        result = apply_overrides({"published": True}, PostOptions(title="T", draft=True))
        assert result["published"] is False

    def test_empty_values_keep_template(self):
        result = apply_overrides({"tags": ["keep"]}, PostOptions(title="T"))
        assert result["tags"] == ["keep"]
        assert "author" not in result


# --- Publishing ---


class TestPublishPost:
    @pytest.mark.asyncio
    async def test_draft_flag(self, tmp_path):
        path = _write_post(tmp_path / "post.md", "title: T\ndraft: true")

        metadata = await publish_post(path)

        assert metadata["draft"] is False
        assert read_post(path)[0]["draft"] is False

    @pytest.mark.asyncio
    async def test_published_flag(self, tmp_path):
        path = _write_post(tmp_path / "post.md", "layout: post\ntitle: T\npublished: false")

        metadata = await publish_post(path)

        assert metadata["published"] is True
        assert "draft" not in metadata

    @pytest.mark.asyncio
    async def test_date_keeps_yaml_date(self, tmp_path):
        path = _write_post(tmp_path / "post.md", "title: T\npubDate: 2024-01-01\ndraft: true")

        await publish_post(path, date(2024, 3, 9))

        assert read_post(path)[0]["pubDate"] == date(2024, 3, 9)

    @pytest.mark.asyncio
    async def test_date_keeps_calendar_string(self, tmp_path):
        path = _write_post(tmp_path / "post.md", "title: T\ndate: '2024-01-01'")

        await publish_post(path, datetime(2024, 3, 9, 8, 0, tzinfo=timezone.utc))

        assert read_post(path)[0]["date"] == "2024-03-09"

    @pytest.mark.asyncio
    async def test_body_is_kept(self, tmp_path):
        path = _write_post(tmp_path / "post.md", "title: T", body="# Keep me\n")
        await publish_post(path)
        assert "# Keep me" in path.read_text()

    @pytest.mark.asyncio
    async def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await publish_post(tmp_path / "missing.md")


class TestUnpublishPost:
    @pytest.mark.asyncio
    async def test_sets_draft(self, tmp_path):
        path = _write_post(tmp_path / "post.md", "title: T\ndraft: false\npublished: true")

        metadata = await unpublish_post(path)

        assert metadata["draft"] is True
        assert metadata["published"] is False


def test_get_post_meta(tmp_path):
    path = _write_post(tmp_path / "post.md", "title: Hello World\ntags: [a]")
    assert get_post_meta(path) == {"title": "Hello World", "tags": ["a"], "slug": "hello-world"}
