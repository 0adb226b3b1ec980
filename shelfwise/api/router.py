"""Main API router."""

from fastapi import APIRouter

from shelfwise.api.books import router as books_router
from shelfwise.api.catalog import router as catalog_router
from shelfwise.api.profile import router as profile_router
from shelfwise.api.reviews import router as reviews_router
from shelfwise.api.shelves import router as shelves_router

api_router = APIRouter(prefix="/api")

api_router.include_router(books_router, prefix="/books", tags=["books"])
api_router.include_router(catalog_router, prefix="/catalog", tags=["catalog"])
api_router.include_router(profile_router, prefix="/profile", tags=["profile"])
api_router.include_router(reviews_router, prefix="/reviews", tags=["reviews"])
api_router.include_router(shelves_router, prefix="/shelves", tags=["shelves"])
