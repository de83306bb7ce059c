"""SQLite-backed record store for products."""

import logging
from decimal import Decimal
from typing import List, Optional, Protocol

from catalog.clients import SqliteClient
from catalog.errors import NotFoundError
from catalog.models import Product

logger = logging.getLogger(__name__)

# Price is stored as TEXT so the decimal value round-trips exactly
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT NOT NULL,
    price TEXT NOT NULL,
    image TEXT NOT NULL DEFAULT ''
)
"""

SELECT_COLUMNS = "SELECT id, name, description, price, image FROM products"


class RecordStore(Protocol):
    """Persistence operations the product service depends on."""

    def find_by_id(self, product_id: int) -> Optional[Product]: ...

    def insert(self, product: Product) -> Product: ...

    def update_in_place(self, product: Product) -> Product: ...

    def delete(self, product_id: int) -> bool: ...

    def list_all(self) -> List[Product]: ...


def _row_to_product(row) -> Product:
    return Product(
        id=row[0],
        name=row[1],
        description=row[2],
        price=Decimal(row[3]),
        image=row[4] or "",
    )


class ProductRepository:
    """Product persistence over a SqliteClient."""

    def __init__(self, sqlite_client: SqliteClient):
        """Initialize the repository and make sure its table exists.

        Args:
            sqlite_client: Open client for the catalog database.
        """
        self._sqlite_client = sqlite_client
        self._ensure_table_exists()

    def _ensure_table_exists(self) -> None:
        self._sqlite_client.execute_query(CREATE_TABLE_SQL)
        logger.debug("Products table initialized")

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """Get a product by id, or None if it does not exist."""
        result = self._sqlite_client.execute_query(
            f"{SELECT_COLUMNS} WHERE id = ?",
            (product_id,),
        )
        if not result:
            return None
        return _row_to_product(result[0])

    def insert(self, product: Product) -> Product:
        """Insert a product and return it with its assigned id."""
        _, new_id = self._sqlite_client.execute_write(
            "INSERT INTO products (name, description, price, image) VALUES (?, ?, ?, ?)",
            (product.name, product.description, str(product.price), product.image or ""),
        )
        logger.info(f"Inserted product {new_id}: {product.name}")
        return Product(
            id=new_id,
            name=product.name,
            description=product.description,
            price=product.price,
            image=product.image or "",
        )

    def update_in_place(self, product: Product) -> Product:
        """Overwrite the stored fields of an existing product.

        Raises:
            NotFoundError: If no row with the product's id exists.
        """
        rowcount, _ = self._sqlite_client.execute_write(
            """UPDATE products
               SET name = ?, description = ?, price = ?, image = ?
               WHERE id = ?""",
            (product.name, product.description, str(product.price), product.image or "", product.id),
        )
        if rowcount == 0:
            raise NotFoundError(f"Product with ID {product.id} not found")

        logger.info(f"Updated product {product.id}")
        return Product(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            image=product.image or "",
        )

    def delete(self, product_id: int) -> bool:
        """Delete a product.

        Returns:
            True if the product was deleted, False if not found.
        """
        rowcount, _ = self._sqlite_client.execute_write(
            "DELETE FROM products WHERE id = ?",
            (product_id,),
        )
        if rowcount:
            logger.info(f"Deleted product {product_id}")
        return rowcount > 0

    def list_all(self) -> List[Product]:
        """Return every product ordered by id."""
        result = self._sqlite_client.execute_query(f"{SELECT_COLUMNS} ORDER BY id")
        return [_row_to_product(row) for row in result]
