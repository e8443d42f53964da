"""VidFast provider: TMDB discovery plus vidfast.pro stream resolution."""

__version__ = "1.0.0"
