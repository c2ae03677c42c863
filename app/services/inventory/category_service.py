"""
Category Service - CRUD operations for product categories.

Follows SRP: Only handles category-related operations, including the guard
that keeps a category alive while products still reference it.
"""
from __future__ import annotations

import logging

from app.core.exceptions import ConflictError
from app.models.inventory_models import Category, Product, count_products_by_category
from app.models.inventory_schemas import CategoryCreate, CategoryOut, CategoryUpdate, PageOut, ProductOut
from app.services.inventory.base import BaseInventoryService, product_to_out
from app.services.inventory.pagination import PRODUCT_SORT_FIELDS, PageRequest, build_page, paginate

logger = logging.getLogger(__name__)


class CategoryService(BaseInventoryService):
    """
    Service for product category operations.

    Handles CRUD operations for organizing products into categories.
    """

    def create_category(self, data: CategoryCreate) -> CategoryOut:
        """Create a new product category."""
        name = data.name.strip()
        self._ensure_name_available(name)
        category = Category(name=name, description=data.description)
        self._db.add(category)
        self._commit("Category")
        self._db.refresh(category)
        self._cache.invalidate_category()
        logger.info(f"Created category: {category.name} (id={category.id})")
        return self._category_out(category)

    def get_category(self, category_id: int) -> CategoryOut:
        """Get a category by ID."""
        return self._cache.read_through(
            self._cache.keys.category(category_id),
            CategoryOut,
            lambda: self._category_out(self._get_category_or_raise(category_id)),
            entity="category",
        )

    def list_categories(self) -> list[CategoryOut]:
        """List all categories ordered by name."""

        def load() -> list[CategoryOut]:
            categories = self._db.query(Category).order_by(Category.name, Category.id).all()
            return [self._category_out(c) for c in categories]

        return self._cache.read_through(
            self._cache.keys.category_list(), list[CategoryOut], load, entity="category"
        )

    def update_category(self, category_id: int, data: CategoryUpdate) -> CategoryOut:
        """Replace a category's name and description."""
        category = self._get_category_or_raise(category_id)
        name = data.name.strip()
        renamed = name != category.name
        if renamed:
            self._ensure_name_available(name)

        category.name = name
        category.description = data.description
        self._commit("Category")
        self._db.refresh(category)

        self._cache.invalidate_category(category.id)
        if renamed:
            # Product responses embed the category name
            self._cache.invalidate_all_products()
        logger.info(f"Updated category: {category.name} (id={category.id})")
        return self._category_out(category)

    def delete_category(self, category_id: int) -> None:
        """Delete a category that no product references any more."""
        category = self._get_category_or_raise(category_id)
        product_count = count_products_by_category(self._db, category_id)
        if product_count > 0:
            raise ConflictError(
                f"Cannot delete category with id {category_id} because it has "
                f"{product_count} associated products",
                category_id=category_id,
                product_count=product_count,
            )
        self._db.delete(category)
        self._commit("Category")
        self._cache.invalidate_category(category_id)
        self._cache.evict_all(self._cache.keys.products_by_category_pages(category_id))
        logger.info(f"Deleted category: {category.name} (id={category_id})")

    def list_products(self, category_id: int, page: PageRequest) -> PageOut[ProductOut]:
        """Page through the products of one category."""

        def load() -> PageOut[ProductOut]:
            self._get_category_or_raise(category_id)
            query = self._db.query(Product).filter(Product.category_id == category_id)
            rows, total = paginate(query, page, PRODUCT_SORT_FIELDS, Product.id)
            return build_page(PageOut[ProductOut], rows, total, page, product_to_out)

        return self._cache.read_through(
            self._cache.keys.products_by_category(category_id, page),
            PageOut[ProductOut],
            load,
            entity="product",
        )

    def _ensure_name_available(self, name: str) -> None:
        exists = self._db.query(Category.id).filter(Category.name == name).first()
        if exists:
            raise ConflictError(f"Category with name '{name}' already exists", name=name)
