"""mdview widgets."""

from .open_modal import OpenFileModal
from .preview import Preview
from .search_bar import SearchBar
from .toc_list import TocList

__all__ = [
    "OpenFileModal",
    "Preview",
    "SearchBar",
    "TocList",
]
