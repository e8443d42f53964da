from .embed import EmbedExtractor, extract_domain

__all__ = ["EmbedExtractor", "extract_domain"]
