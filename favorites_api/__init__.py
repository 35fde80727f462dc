"""FastAPI service persisting a user's favorite movies."""
