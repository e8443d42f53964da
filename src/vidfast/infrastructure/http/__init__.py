from .base import HttpxStepClient, build_http_client

__all__ = ["HttpxStepClient", "build_http_client"]
