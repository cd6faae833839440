"""Common test fixtures."""

import json
from pathlib import Path

import pytest

ASTRO_CONTENT_CONFIG = """
import { defineCollection, z } from 'astro:content';

const blog = defineCollection({
  type: 'content',
  schema: ({ image }) => z.object({
    title: z.string(),
    description: z.string(),
    pubDate: z.coerce.date(),
    updatedDate: z.coerce.date().optional(),
    heroImage: image().optional(),
    tags: z.array(z.string()).default([]),
    draft: z.boolean().default(false),
  }),
});

const authors = defineCollection({
  type: 'data',
  schema: z.object({ name: z.string() }),
});

export const collections = { blog, authors };
"""


def write_package_json(root: Path, dependencies: dict[str, str]) -> None:
    (root / "package.json").write_text(
        json.dumps({"name": "site", "dependencies": dependencies}), encoding="utf-8"
    )


@pytest.fixture
def astro_project(tmp_path) -> Path:
    """Astro project with a content config and no posts."""
    write_package_json(tmp_path, {"astro": "^4.5.0"})
    config = tmp_path / "src" / "content" / "config.ts"
    config.parent.mkdir(parents=True)
    config.write_text(ASTRO_CONTENT_CONFIG, encoding="utf-8")
    return tmp_path


@pytest.fixture
def jekyll_project(tmp_path) -> Path:
    (tmp_path / "_config.yml").write_text("title: My Blog\n")
    (tmp_path / "_posts").mkdir()
    (tmp_path / "Gemfile").write_text("source 'https://rubygems.org'\n")
    return tmp_path
