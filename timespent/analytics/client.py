from __future__ import annotations

from typing import Any

import httpx


class AnalyticsClient:
    def __init__(
        self,
        api_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self._client = httpx.Client(
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": token,
            },
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def build_url(self, params: dict[str, Any]) -> str:
        return str(httpx.URL(self.api_url).copy_merge_params(params))

    def get_json(self, params: dict[str, Any]) -> Any:
        """Single GET, no retries. Non-2xx raises ``httpx.HTTPStatusError``, bad JSON raises ``ValueError``."""
        response = self._client.get(self.api_url, params=params)
        response.raise_for_status()
        return response.json()
