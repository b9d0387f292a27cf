"""Public interface for the generic HTTP API adapter."""

from __future__ import annotations

from .auth import authenticate, request_token
from .fetcher import DocumentFetcher
from .local_save import LocalSaveTarget, save_document
from .paginator import Paginator

__all__ = [
    "DocumentFetcher",
    "LocalSaveTarget",
    "Paginator",
    "authenticate",
    "request_token",
    "save_document",
]
