
from fastapi import APIRouter

# Auth
from app.api.v1.public.auth import router as auth_router

# Public: shows, seat map, booking submission
from app.api.v1.public.shows import router as shows_router

# Public: booking lifecycle
from app.api.v1.public.bookings import router as bookings_router

# Admin
from app.api.v1.admin.shows import router as admin_shows_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public ---
api_router.include_router(shows_router)
api_router.include_router(bookings_router)

# --- Admin ---
api_router.include_router(admin_shows_router)
