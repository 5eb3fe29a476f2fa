"""Product aggregate.

Products live independently of orders and lots. Orders resolve their
lines by SKU; inventory listings show the SKU, name and unit.
"""

from __future__ import annotations

from dataclasses import dataclass

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import TempClass


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    sku: str
    name: str
    unit: str = "KG"
    temp_class: TempClass = TempClass.FROZEN

    @staticmethod
    def create(
        product_id: str,
        sku: str,
        name: str,
        unit: str = "KG",
        temp_class: TempClass = TempClass.FROZEN,
    ) -> Product:
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not unit or not unit.strip():
            raise ValidationError("Product unit is required")
        return Product(
            id=product_id,
            sku=sku.strip().upper(),
            name=name.strip(),
            unit=unit.strip().upper(),
            temp_class=temp_class,
        )
