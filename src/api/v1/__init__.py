"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.albums import router as albums_router
from api.v1.routes.invitations import album_invitations_router, invitations_router

router = APIRouter()
router.include_router(albums_router)
router.include_router(album_invitations_router)
router.include_router(invitations_router)
