"""FastAPI routers acting as controllers in the MVC architecture."""

from . import checkout, sessions, status

__all__ = ["checkout", "sessions", "status"]
