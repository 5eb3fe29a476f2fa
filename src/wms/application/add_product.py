"""Application service: Add Product use case."""

from __future__ import annotations

from wms.domain.exceptions import ValidationError
from wms.domain.model.product import Product
from wms.domain.model.value_objects import TempClass
from wms.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        sku: str,
        name: str,
        unit: str = "KG",
        temp_class: str = "FROZEN",
    ) -> Product:
        """Add a new product to the catalog."""
        try:
            temp = TempClass(temp_class.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown temperature class {temp_class!r}") from exc

        if sku and self._product_repo.get_by_sku(sku) is not None:
            raise ValidationError(f"Product '{sku}' already exists")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product.create(next_id, sku=sku, name=name, unit=unit, temp_class=temp)
        self._product_repo.save(product)
        return product
