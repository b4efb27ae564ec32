# Routes package __init__.py - re-exports routers for main.py convenience
from .sentences import router as sentences_router
from .admin import router as admin_router

__all__ = ['sentences_router', 'admin_router']
