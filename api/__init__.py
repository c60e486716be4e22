"""
Todo API - FastAPI service implementing the remote todo storage endpoints
"""

from .server import create_app, InMemoryStorageService

__all__ = ['create_app', 'InMemoryStorageService']
