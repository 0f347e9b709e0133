"""Persistence collaborators used by the editor store."""
from typing import Optional, Protocol

import httpx

from landingpad.config import settings
from landingpad.editor.document import Project
from landingpad.utils.exceptions import ExternalServiceError
from landingpad.utils.logger import logger


class ProjectPersistence(Protocol):
    """Anything that can store and fetch a whole project document."""

    async def save_project(self, project: Project) -> None:
        ...

    async def load_project(self, project_id: str) -> Project:
        ...


class HttpProjectPersistence:
    """Saves and loads projects through the website document REST endpoints."""

    def __init__(
        self,
        user_id: str,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.user_id = user_id
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _project_url(self, project_id: str) -> str:
        return f"{self.base_url}/api/websites/{project_id}/project"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def save_project(self, project: Project) -> None:
        """
        PUT the full project document.

        Raises:
            ExternalServiceError: On transport errors or a non-2xx response
        """
        try:
            async with self._client() as client:
                response = await client.put(
                    self._project_url(project.id),
                    params={"user_id": self.user_id},
                    json=project.to_dict(),
                )
        except httpx.HTTPError as e:
            logger.error(f"Request to save project {project.id} failed: {e}")
            raise ExternalServiceError(f"Save request failed: {e}") from e

        if not response.is_success:
            raise ExternalServiceError(
                f"Save rejected with status {response.status_code}: {response.text}"
            )

    async def load_project(self, project_id: str) -> Project:
        """
        GET the project document.

        Raises:
            ExternalServiceError: On transport errors or a non-200 response
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    self._project_url(project_id),
                    params={"user_id": self.user_id},
                )
        except httpx.HTTPError as e:
            logger.error(f"Request to load project {project_id} failed: {e}")
            raise ExternalServiceError(f"Load request failed: {e}") from e

        if response.status_code != 200:
            raise ExternalServiceError(
                f"Load rejected with status {response.status_code}: {response.text}"
            )
        return Project.from_dict(response.json())
