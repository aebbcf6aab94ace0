"""
Core data types shared by the fetch pipeline, the server and the CLI.
"""

from .types import (
    ContentKind,
    FetchRequest,
    PaginatedView,
    RequestValidationError,
    SimplificationFailure,
    SimplifiedArticle,
    notice,
)

__all__ = [
    "ContentKind",
    "FetchRequest",
    "PaginatedView",
    "RequestValidationError",
    "SimplificationFailure",
    "SimplifiedArticle",
    "notice",
]
