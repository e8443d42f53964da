from .resolver import VidFastLinkResolver, embed_url, page_url

__all__ = ["VidFastLinkResolver", "embed_url", "page_url"]
