"""Product loading from JSON product lists."""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from pos_discount.exceptions import ProductLoadError
from pos_discount.models import Product

logger = logging.getLogger(__name__)


class ProductRecord(BaseModel):
    """One product entry as found in a products file."""
    id: Optional[int] = None
    sku: str = ""
    name: str
    price: Decimal = Field(ge=0)
    discount: Decimal = Decimal("0")
    tags: List[str]

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept keys in any case (`Price`, `SKU`, `tags`)."""
        if isinstance(data, dict):
            return {str(k).lower(): v for k, v in data.items()}
        return data

    @field_validator("price", "discount", mode="before")
    @classmethod
    def parse_money(cls, v):
        """Read floats through their string form so 0.1 stays 0.1."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    def to_product(self, fallback_id: int) -> Product:
        return Product(
            id=self.id if self.id is not None else fallback_id,
            sku=self.sku,
            name=self.name,
            price=self.price,
            tags=frozenset(self.tags),
            discount=self.discount,
        )


def parse_products(data: Union[str, bytes, list]) -> List[Product]:
    """
    Build cart products from JSON text or an already decoded list.

    Products without an id are numbered from 1 in file order.

    Raises:
        ProductLoadError: on invalid JSON or any invalid product entry
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ProductLoadError(f"Products are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ProductLoadError("Products must be a JSON array")

    problems: List[str] = []
    products: List[Product] = []
    for index, entry in enumerate(data):
        try:
            record = ProductRecord.model_validate(entry)
        except ValidationError as e:
            for err in e.errors():
                location = ".".join(str(part) for part in err["loc"]) or "entry"
                problems.append(f"item {index}: {location}: {err['msg']}")
            continue
        products.append(record.to_product(fallback_id=index + 1))

    if problems:
        raise ProductLoadError(
            f"{len(problems)} invalid product field(s)",
            problems=problems,
        )

    logger.debug(f"Parsed {len(products)} product(s)")
    return products


def load_products(path: Union[str, Path]) -> List[Product]:
    """Read products from a JSON file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProductLoadError(f"Cannot read products file {path}: {e}") from e
    products = parse_products(text)
    logger.info(f"Loaded {len(products)} product(s) from {path}")
    return products
