"""ORM model for catalog products."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
    true,
)

from app.models.base import Base

DESCRIPTION_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 100
PRICE_PRECISION = 12
PRICE_SCALE = 2


class Product(Base):
    """
    Catalog product owned by the user who created it.

    Deletion is soft: is_active goes False and every read filters it out.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("stock >= 0", name="stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=False, default="")
    category = Column(String(CATEGORY_MAX_LENGTH), nullable=True, index=True)
    price = Column(Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} owner_id={self.owner_id} active={self.is_active}>"
