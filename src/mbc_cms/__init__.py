"""MBC CMS API - content-management backend with role-based access control.

Roles own named permissions at integer levels; users hold exactly one role;
a single configured administrator bypasses the role graph.
"""

__version__ = "1.0.0"

from mbc_cms.infrastructure.api.app import app

__all__ = ["app", "__version__"]
