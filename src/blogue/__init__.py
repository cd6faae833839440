"""blogue - frontmatter inference and post scaffolding for markdown blogs."""

__version__ = "0.1.0"
