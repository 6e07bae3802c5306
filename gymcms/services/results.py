from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ListResult:
    """A page of results plus the size of the unpaginated, visibility-filtered set."""

    items: List
    total: int
    limit: Optional[int] = None
    offset: int = 0
