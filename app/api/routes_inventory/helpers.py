"""Helper functions for inventory routes."""
from fastapi import Query

from app.core.config import settings
from app.services.inventory import PageRequest


def page_params(default_sort: str):
    """Build a dependency reading page/size/sort_by/sort_dir query parameters."""

    def dependency(
        page: int = Query(0, description="Page number (0-based)"),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, description="Page size"),
        sort_by: str = Query(default_sort, description="Sort field"),
        sort_dir: str = Query("asc", description="Sort direction (asc/desc)"),
    ) -> PageRequest:
        return PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)

    return dependency
