"""Product flow: validated CRUD with owner checks and soft delete."""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.errors import ErrorKind, ServiceError
from app.models.product import DESCRIPTION_MAX_LENGTH, PRICE_PRECISION, PRICE_SCALE, Product
from app.repositories.products import ProductRepository
from app.repositories.users import UserRepository
from app.schemas.product import ProductRequest, ProductStatisticsResponse

logger = logging.getLogger(__name__)


PRICE_LIMIT = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)
PRICE_STEP = Decimal(1).scaleb(-PRICE_SCALE)


def validate_product_data(data: ProductRequest) -> None:
    """
    Raise INVALID_ARGUMENT for the first violated rule: description length, price, stock.

    Price must also fit the products.price column exactly (below PRICE_LIMIT, at
    most PRICE_SCALE decimal places) so storage never rounds it to 0.
    """
    if data.description and len(data.description) > DESCRIPTION_MAX_LENGTH:
        raise ServiceError(
            ErrorKind.INVALID_ARGUMENT,
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
        )
    if data.price is None or data.price <= Decimal("0"):
        raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Price must be greater than 0")
    if data.price >= PRICE_LIMIT:
        raise ServiceError(ErrorKind.INVALID_ARGUMENT, f"Price must be less than {PRICE_LIMIT}")
    if data.price != data.price.quantize(PRICE_STEP):
        raise ServiceError(
            ErrorKind.INVALID_ARGUMENT,
            f"Price cannot have more than {PRICE_SCALE} decimal places",
        )
    if data.stock is None or data.stock < 0:
        raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Stock cannot be negative")


def _clean_category(category: str | None) -> str | None:
    if category is None:
        return None
    return category.strip() or None


class ProductService:
    def __init__(self, db: Session):
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    def get_by_id(self, product_id: int) -> Product | None:
        product = self.products.get_by_id(product_id)
        if product is None:
            logger.warning("Product not found: product_id=%s", product_id)
        return product

    def list_all(self) -> list[Product]:
        return self.products.list_all()

    def list_by_category(self, category: str) -> list[Product]:
        if not category or not category.strip():
            raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Category cannot be empty")
        return self.products.list_by_category(category.strip())

    def search_by_name(self, search_term: str | None) -> list[Product]:
        if not search_term or not search_term.strip():
            raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Search term cannot be empty")
        results = self.products.search_by_description(search_term.strip())
        logger.info("Search term=%r matched %s products", search_term, len(results))
        return results

    def list_by_owner(self, user_id: int) -> list[Product]:
        return self.products.list_by_owner(user_id)

    def create(self, data: ProductRequest, user_id: int) -> Product:
        if self.users.get_by_id(user_id) is None:
            raise ServiceError(ErrorKind.INVALID_ARGUMENT, "User not found")
        validate_product_data(data)
        product = self.products.create(
            owner_id=user_id,
            description=(data.description or "").strip(),
            category=_clean_category(data.category),
            price=data.price,
            stock=data.stock,
        )
        logger.info("Created product_id=%s for user_id=%s", product.id, user_id)
        return product

    def update(self, product_id: int, data: ProductRequest, user_id: int) -> Product | None:
        """Return the updated product, or None if it does not exist. Only the owner may update."""
        product = self.products.get_by_id(product_id)
        if product is None:
            logger.warning("Product not found for update: product_id=%s", product_id)
            return None
        self._require_owner(product, user_id, "update")
        validate_product_data(data)
        product = self.products.update(
            product,
            description=(data.description or "").strip(),
            category=_clean_category(data.category),
            price=data.price,
            stock=data.stock,
        )
        logger.info("Updated product_id=%s by user_id=%s", product_id, user_id)
        return product

    def delete(self, product_id: int, user_id: int) -> bool:
        """Soft-delete; False if the product does not exist. Only the owner may delete."""
        product = self.products.get_by_id(product_id)
        if product is None:
            logger.warning("Product not found for delete: product_id=%s", product_id)
            return False
        self._require_owner(product, user_id, "delete")
        self.products.soft_delete(product)
        logger.info("Deleted product_id=%s by user_id=%s", product_id, user_id)
        return True

    def get_statistics(self) -> ProductStatisticsResponse:
        return ProductStatisticsResponse(
            total_products=self.products.count_active(),
            timestamp=datetime.now(UTC),
        )

    @staticmethod
    def _require_owner(product: Product, user_id: int, action: str) -> None:
        if product.owner_id != user_id:
            logger.warning(
                "Forbidden %s of product_id=%s by user_id=%s (owner_id=%s)",
                action,
                product.id,
                user_id,
                product.owner_id,
            )
            raise ServiceError(
                ErrorKind.FORBIDDEN,
                f"You do not have permission to {action} this product",
            )
