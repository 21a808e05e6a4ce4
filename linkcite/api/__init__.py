"""
HTTP API
========

FastAPI routers exposing citation generation.
"""

from linkcite.api.citation_router import router as citation_router

__all__ = ["citation_router"]
