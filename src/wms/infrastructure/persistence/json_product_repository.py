"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from pathlib import Path

from wms.domain.model.product import Product
from wms.domain.model.value_objects import TempClass
from wms.domain.repository.product_repository import ProductRepository
from wms.infrastructure.persistence.json_store import JsonFileStore


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        products = self._load()
        return products.get(product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        wanted = sku.strip().upper()
        for product in self._load().values():
            if product.sku.upper() == wanted:
                return product
        return None

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        with self._store.locked():
            products = self._load()
            products[product.id] = product
            self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        return {
            item["id"]: Product(
                id=item["id"],
                sku=item["sku"],
                name=item["name"],
                unit=item.get("unit", "KG"),
                temp_class=TempClass(item.get("temp_class", TempClass.FROZEN.value)),
            )
            for item in self._store.load_raw()
        }

    def _persist(self, products: dict[str, Product]) -> None:
        self._store.persist_raw(
            [
                {
                    "id": p.id,
                    "sku": p.sku,
                    "name": p.name,
                    "unit": p.unit,
                    "temp_class": p.temp_class.value,
                }
                for p in products.values()
            ]
        )
