from __future__ import annotations

from fastapi import APIRouter

from . import imports, system

router = APIRouter()
router.include_router(system.router)
router.include_router(imports.router)

__all__ = ["router"]
