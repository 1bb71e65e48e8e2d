"""Product catalog domain service."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from defter.domain.entities import Product
from defter.domain.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    duplicate_name,
    product_id_not_found,
)
from defter.domain.ledger import LedgerRepository
from defter.utils.amount_parser import parse_optional_amount
from defter.utils.ids import generate_id
from defter.utils.names import name_key

log = logging.getLogger("defter.products")

DEFAULT_PRODUCT_TYPE = "DİĞER"
ZERO = Decimal("0")


def _price(value, field: str) -> Decimal:
    try:
        return parse_optional_amount(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {e}") from e


class ProductService:
    """Service for managing the product catalog of the current ledger."""

    def __init__(self, repository: LedgerRepository):
        """Initialize product service.

        Args:
            repository: Ledger repository holding the current ledger
        """
        self.repository = repository

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Product name is required")
        for product in self.repository.data.products:
            if product.id != exclude_id and name_key(product.name) == name_key(name):
                raise ConflictError(duplicate_name("Product", name))
        return name

    def _save(self, previous: list[Product]) -> None:
        try:
            self.repository.save_products()
        except PersistenceError:
            self.repository.data.products = previous
            raise

    def add_product(
        self,
        name: str,
        selling_price,
        buying_price=None,
        type: str = DEFAULT_PRODUCT_TYPE,
        unit: str = "",
    ) -> Product:
        """Add a product with zero stock.

        Raises:
            ValidationError: If name is blank or selling price is not positive
            ConflictError: If a product with the same name exists
        """
        name = self._check_name(name)
        selling = _price(selling_price, "selling price")
        buying = _price(buying_price, "buying price")
        if selling <= ZERO:
            raise ValidationError("Product name and a positive price are required")
        if buying < ZERO:
            raise ValidationError("Buying price must be >= 0")

        product = Product(
            id=generate_id(),
            name=name,
            type=(type or DEFAULT_PRODUCT_TYPE).strip(),
            unit=(unit or "").strip(),
            selling_price=selling,
            buying_price=buying,
            stock=ZERO,
        )
        data = self.repository.data
        previous = list(data.products)
        data.products.append(product)
        self._save(previous)
        log.info("product_added id=%s name=%s price=%s", product.id, name, selling)
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        for product in self.repository.data.products:
            if product.id == product_id:
                return product
        return None

    def require_product(self, product_id: str) -> Product:
        """Get product by ID or raise NotFoundError."""
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(product_id_not_found(product_id))
        return product

    def find_product(self, name: str) -> Optional[Product]:
        """Find a product by case-insensitive name."""
        return self.repository.data.find_product(name)

    def edit_product(
        self,
        product_id: str,
        name: str,
        selling_price=None,
        buying_price=None,
        type: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> Product:
        """Edit a product. Stock is kept as it is.

        Fields left as None keep their current value. Recorded transactions
        keep the name and price they were recorded with.

        Raises:
            NotFoundError: If product doesn't exist
            ValidationError: If name is blank or a price is negative
            ConflictError: If another product already has the name
        """
        product = self.require_product(product_id)
        name = self._check_name(name, exclude_id=product_id)
        selling = product.selling_price if selling_price is None else _price(selling_price, "selling price")
        buying = product.buying_price if buying_price is None else _price(buying_price, "buying price")
        if selling < ZERO or buying < ZERO:
            raise ValidationError("Invalid product name or price")

        updated = replace(
            product,
            name=name,
            selling_price=selling,
            buying_price=buying,
            type=product.type if type is None else type.strip(),
            unit=product.unit if unit is None else unit.strip(),
        )
        data = self.repository.data
        previous = list(data.products)
        data.products[data.products.index(product)] = updated
        self._save(previous)
        log.info("product_updated id=%s name=%s", product_id, name)
        return updated

    def delete_product(self, product_id: str) -> Product:
        """Delete a product. Recorded transactions are left untouched.

        Raises:
            NotFoundError: If product doesn't exist
        """
        product = self.require_product(product_id)
        data = self.repository.data
        previous = list(data.products)
        data.products = [p for p in data.products if p.id != product_id]
        self._save(previous)
        log.info("product_deleted id=%s name=%s", product_id, product.name)
        return product

    def add_stock(self, product_id: str, quantity) -> Product:
        """Add a positive quantity to a product's stock.

        Raises:
            NotFoundError: If product doesn't exist
            ValidationError: If quantity is not a positive number
        """
        try:
            amount = parse_optional_amount(quantity)
        except ValueError as e:
            raise ValidationError(f"Please enter a valid quantity: {e}") from e
        if amount <= ZERO:
            raise ValidationError("Please enter a valid quantity")

        product = self.require_product(product_id)
        updated = replace(product, stock=product.stock + amount)
        data = self.repository.data
        previous = list(data.products)
        data.products[data.products.index(product)] = updated
        self._save(previous)
        log.info("stock_added id=%s name=%s qty=%s stock=%s", product_id, product.name, amount, updated.stock)
        return updated

    def list_products(self) -> list[Product]:
        """List the catalog in insertion order."""
        return list(self.repository.data.products)
