"""Shared-secret check for API routes."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from ..exceptions import UnauthorizedError

API_KEY_HEADER = "X-API-KEY"

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


@dataclass(frozen=True, slots=True)
class ApiKeyPolicy:
    """Exact-match shared secret; disabled when no key is configured."""

    expected: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.expected)

    def verify(self, provided: str | None) -> bool:
        if not self.enabled:
            return True
        if provided is None:
            return False
        return secrets.compare_digest(provided.encode("utf-8"), self.expected.encode("utf-8"))


def get_api_key_policy(request: Request) -> ApiKeyPolicy:
    try:
        return request.app.state.api_key_policy  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ApiKeyPolicy is not configured") from exc


async def require_api_key(
    request: Request,
    provided: str | None = Depends(api_key_header),
    policy: ApiKeyPolicy = Depends(get_api_key_policy),
) -> None:
    if policy.verify(provided):
        return
    logger.warning(
        "api_key.rejected",
        extra={
            "path": request.url.path,
            "has_key": provided is not None,
            "client_ip": request.client.host if request.client else None,
        },
    )
    raise UnauthorizedError()
