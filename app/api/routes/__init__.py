"""API routes."""

from fastapi import APIRouter

from app.api.routes import auth, products

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(products.router, prefix="/product", tags=["product"])
