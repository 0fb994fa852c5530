"""Post module dependencies."""

from src.modules.posts.infrastructure.prismic import PrismicContentSource


def get_content_source() -> PrismicContentSource:
    return PrismicContentSource()
