from coffeenotes.web.routers.likes import router as likes_router
from coffeenotes.web.routers.notes import router as notes_router

__all__ = [
    "likes_router",
    "notes_router",
]
