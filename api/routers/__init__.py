"""
HTTP routers for authors and books.
"""

from .authors import router as authors_router  # noqa: F401
from .books import router as books_router  # noqa: F401
