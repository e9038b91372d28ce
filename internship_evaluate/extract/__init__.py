"""Repository content extraction."""

from internship_evaluate.extract.github import (
    IMAGE_EXTENSIONS,
    TEXT_EXTENSIONS,
    RepositoryExtractor,
    parse_repository_url,
)

__all__ = ["IMAGE_EXTENSIONS", "TEXT_EXTENSIONS", "RepositoryExtractor", "parse_repository_url"]
