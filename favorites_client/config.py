from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class ClientSettings:
    api_base_url: str = "http://localhost:5000/api"
    fallback_path: str = "data/favorites_fallback.json"
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> ClientSettings:
        return cls(
            api_base_url=os.getenv("FAVORITES_API_BASE_URL", cls.api_base_url),
            fallback_path=os.getenv("FAVORITES_FALLBACK_PATH", cls.fallback_path),
            request_timeout=float(
                os.getenv("FAVORITES_REQUEST_TIMEOUT", str(cls.request_timeout))
            ),
        )
