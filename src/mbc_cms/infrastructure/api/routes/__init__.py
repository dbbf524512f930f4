"""API routes for the MBC CMS API."""

from mbc_cms.infrastructure.api.routes.roles_router import router as roles_router

__all__ = ["roles_router"]
