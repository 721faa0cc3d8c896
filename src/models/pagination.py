"""
Offset pagination shared by the list endpoints
"""

from dataclasses import dataclass

from config.settings import DEFAULT_PER_PAGE


@dataclass(frozen=True)
class Pagination:
    """1-based page number and page size"""
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page
