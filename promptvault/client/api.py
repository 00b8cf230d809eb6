from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..app.schemas import ExportEnvelope, HealthRead, ImportResult
from .prompts import Folder, Prompt

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed call to the PromptVault API.

    ``status_code`` is the HTTP status, or 0 when the server could not be
    reached at all.
    """

    def __init__(self, message: str, status_code: int, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def unreachable(self) -> bool:
        return self.status_code == 0

    def __str__(self) -> str:
        if self.unreachable:
            return f"{self.message} (unreachable)"
        return f"{self.message} (HTTP {self.status_code})"


def _handle_response(response: httpx.Response) -> Any:
    if response.is_error:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        message = payload.get("error") if isinstance(payload, dict) else None
        raise ApiError(message or f"HTTP {response.status_code}", response.status_code, payload)
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ApiError("Invalid JSON response", response.status_code) from exc


def _dump(model: Any) -> Dict[str, Any]:
    return model.model_dump(by_alias=True)


class ApiClient:
    """Async client for the PromptVault REST API."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, f"/api{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Unable to reach {self.base_url}: {exc}", 0) from exc
        return _handle_response(response)

    async def health(self, timeout: Optional[float] = None) -> HealthRead:
        kwargs: Dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        data = await self._request("GET", "/health", **kwargs)
        return HealthRead.model_validate(data)

    # Prompts

    async def list_prompts(self) -> List[Prompt]:
        data = await self._request("GET", "/prompts")
        return [Prompt.model_validate(item) for item in data or []]

    async def get_prompt(self, prompt_id: str) -> Prompt:
        return Prompt.model_validate(await self._request("GET", f"/prompts/{prompt_id}"))

    async def create_prompt(self, prompt: Prompt) -> Prompt:
        data = await self._request("POST", "/prompts", json=_dump(prompt))
        return Prompt.model_validate(data)

    async def update_prompt(self, prompt_id: str, prompt: Prompt) -> Prompt:
        data = await self._request("PUT", f"/prompts/{prompt_id}", json=_dump(prompt))
        return Prompt.model_validate(data)

    async def delete_prompt(self, prompt_id: str) -> None:
        await self._request("DELETE", f"/prompts/{prompt_id}")

    # Folders

    async def list_folders(self) -> List[Folder]:
        data = await self._request("GET", "/folders")
        return [Folder.model_validate(item) for item in data or []]

    async def get_folder(self, folder_id: str) -> Folder:
        return Folder.model_validate(await self._request("GET", f"/folders/{folder_id}"))

    async def create_folder(self, folder: Folder) -> Folder:
        data = await self._request("POST", "/folders", json=_dump(folder))
        return Folder.model_validate(data)

    async def update_folder(self, folder_id: str, folder: Folder) -> Folder:
        data = await self._request("PUT", f"/folders/{folder_id}", json=_dump(folder))
        return Folder.model_validate(data)

    async def delete_folder(self, folder_id: str) -> None:
        await self._request("DELETE", f"/folders/{folder_id}")

    # Import / export

    async def import_data(self, prompts: Sequence[Prompt], folders: Sequence[Folder]) -> ImportResult:
        payload = {
            "prompts": [_dump(prompt) for prompt in prompts],
            "folders": [_dump(folder) for folder in folders],
        }
        return ImportResult.model_validate(await self._request("POST", "/import", json=payload))

    async def export_data(self) -> ExportEnvelope:
        return ExportEnvelope.model_validate(await self._request("GET", "/export"))


__all__ = ["ApiClient", "ApiError"]
