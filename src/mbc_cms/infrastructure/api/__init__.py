"""HTTP adapter exposing the RBAC core through FastAPI."""
