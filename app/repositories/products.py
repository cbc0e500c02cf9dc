"""Product store: CRUD over the products table. Inactive (deleted) rows are never returned."""

from decimal import Decimal

from sqlalchemy import func, literal
from sqlalchemy.orm import Query, Session

from app.models.product import Product


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def _active(self) -> Query:
        return self.db.query(Product).filter(Product.is_active.is_(True))

    def get_by_id(self, product_id: int) -> Product | None:
        return self._active().filter(Product.id == product_id).first()

    def list_all(self) -> list[Product]:
        return self._active().order_by(Product.id).all()

    def list_by_category(self, category: str) -> list[Product]:
        """Case-insensitive exact match on category; both sides are lowered by the database."""
        return (
            self._active()
            .filter(func.lower(Product.category) == func.lower(literal(category)))
            .order_by(Product.id)
            .all()
        )

    def search_by_description(self, term: str) -> list[Product]:
        """Case-insensitive substring match on description; % and _ in term match literally."""
        return (
            self._active()
            .filter(Product.description.icontains(term, autoescape=True))
            .order_by(Product.id)
            .all()
        )

    def list_by_owner(self, owner_id: int) -> list[Product]:
        return self._active().filter(Product.owner_id == owner_id).order_by(Product.id).all()

    def count_active(self) -> int:
        return self._active().with_entities(func.count(Product.id)).scalar() or 0

    def create(
        self,
        owner_id: int,
        description: str,
        price: Decimal,
        stock: int,
        category: str | None = None,
    ) -> Product:
        product = Product(
            owner_id=owner_id,
            description=description,
            category=category,
            price=price,
            stock=stock,
            is_active=True,
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(
        self,
        product: Product,
        description: str,
        price: Decimal,
        stock: int,
        category: str | None = None,
    ) -> Product:
        product.description = description
        product.category = category
        product.price = price
        product.stock = stock
        self.db.commit()
        self.db.refresh(product)
        return product

    def soft_delete(self, product: Product) -> None:
        product.is_active = False
        self.db.commit()
