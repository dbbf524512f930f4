"""Authentication helpers."""

from mbc_cms.infrastructure.auth.password_hasher import hash_password, verify_password

__all__ = ["hash_password", "verify_password"]
