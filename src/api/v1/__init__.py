"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.auth import router as auth_router
from api.v1.routes.cards import router as cards_router
from api.v1.routes.dashboard import router as dashboard_router
from api.v1.routes.invitations import invitations_router, workspace_invitations_router
from api.v1.routes.settings import router as settings_router
from api.v1.routes.transactions import router as transactions_router
from api.v1.routes.workspaces import router as workspaces_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(workspaces_router)
router.include_router(workspace_invitations_router)
router.include_router(invitations_router)
router.include_router(settings_router)
router.include_router(cards_router)
router.include_router(transactions_router)
router.include_router(dashboard_router)
