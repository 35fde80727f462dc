"""Favorites domain components split by responsibility.

Persistence owns the SQL statements, serialization owns the mapping between
table rows and API schemas.
"""

from .persistence import FavoritesPersistence
from .serialization import FavoritesSerializer

__all__ = [
    "FavoritesPersistence",
    "FavoritesSerializer",
]
