"""Conversions between API payloads and favorites table rows."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence

from favorites_api.db.models import FavoriteMovie as FavoriteMovieModel
from favorites_api.schemas.favorites import FavoriteMovie, FavoriteMovieCreate

logger = logging.getLogger(__name__)


class FavoritesSerializer:
    """Translate between pydantic schemas and ORM rows.

    The only non-trivial field is ``genre_ids``: the table stores it as a JSON
    text blob and every read decodes it back into a list of integers.
    """

    @staticmethod
    def encode_genre_ids(genre_ids: Sequence[int] | None) -> str:
        """Serialize genre identifiers, preserving their order."""

        return json.dumps(list(genre_ids or []))

    @staticmethod
    def decode_genre_ids(raw: str | None) -> list[int]:
        """Parse a stored genre blob; unset or unreadable blobs become ``[]``."""

        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable genre_ids value: %r", raw)
            return []
        if not isinstance(decoded, list):
            return []
        return [int(genre_id) for genre_id in decoded]

    def to_model(self, payload: FavoriteMovieCreate) -> FavoriteMovieModel:
        """Build an unsaved row from an add-to-favorites payload."""

        return FavoriteMovieModel(
            movie_id=payload.id,
            title=payload.title,
            poster_path=payload.poster_path,
            release_date=payload.release_date,
            overview=payload.overview,
            vote_average=payload.vote_average,
            vote_count=payload.vote_count,
            genre_ids=self.encode_genre_ids(payload.genre_ids),
            original_language=payload.original_language,
            popularity=payload.popularity,
            backdrop_path=payload.backdrop_path,
            adult=payload.adult,
            video=payload.video,
            original_title=payload.original_title,
        )

    def to_schema(self, row: FavoriteMovieModel) -> FavoriteMovie:
        """Expose a stored row using the movie source's field names."""

        return FavoriteMovie(
            id=row.movie_id,
            title=row.title,
            poster_path=row.poster_path,
            release_date=row.release_date,
            overview=row.overview,
            vote_average=row.vote_average,
            vote_count=row.vote_count,
            genre_ids=self.decode_genre_ids(row.genre_ids),
            original_language=row.original_language,
            popularity=row.popularity,
            backdrop_path=row.backdrop_path,
            adult=row.adult,
            video=row.video,
            original_title=row.original_title,
            added_at=row.added_at,
        )

    def to_schemas(self, rows: Iterable[FavoriteMovieModel]) -> list[FavoriteMovie]:
        return [self.to_schema(row) for row in rows]
