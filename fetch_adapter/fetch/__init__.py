"""
Page fetching, classification, simplification and pagination.

Each stage is a plain function over the previous stage's output; the
runner module wires them together.
"""

from .classifier import binary_refusal, classify
from .extractor import extract_content, simplify
from .fetcher import FetchResult, fetch_url
from .paginator import paginate

__all__ = [
    "FetchResult",
    "binary_refusal",
    "classify",
    "extract_content",
    "fetch_url",
    "paginate",
    "simplify",
]
