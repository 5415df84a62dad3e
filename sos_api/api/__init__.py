"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from sos_api.api import auth, data_entries

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(data_entries.router, prefix="/data-entries", tags=["data-entries"])
