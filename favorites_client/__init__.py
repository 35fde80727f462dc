"""Client-side synchronizer for the movie favorites API."""

from favorites_client.api import FavoritesApiClient
from favorites_client.config import ClientSettings
from favorites_client.errors import ApiResponseError, NetworkError
from favorites_client.storage import LocalFavoritesStore
from favorites_client.synchronizer import FavoritesSynchronizer

__all__ = [
    "ApiResponseError",
    "ClientSettings",
    "FavoritesApiClient",
    "FavoritesSynchronizer",
    "LocalFavoritesStore",
    "NetworkError",
]
