from .wyzie import WyzieSubtitleClient

__all__ = ["WyzieSubtitleClient"]
