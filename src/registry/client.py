"""
HTTP client for the Project Registry API.

Registry failures (Unauthorized, MemberNotFound, ...) come back as
OperationResult values; transport failures and unexpected responses raise
RuntimeError.
"""

from typing import Any, Dict, Optional

import requests

from ..shared.config import TIMEOUT_MATRIX, get_registry_api_url
from ..shared.logger import get_logger
from .errors import RegistryErrorCode
from .types import CALLER_HEADER, OperationResult, Project, normalize_identity

logger = get_logger("registry-client", __name__)


class RegistryClient:
    """Thin wrapper over the registry REST endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        caller: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = get_registry_api_url(base_url)
        self.caller = normalize_identity(caller) if caller else None
        self.timeout = timeout if timeout is not None else TIMEOUT_MATRIX["REGISTRY_HTTP"]

    def _headers(self) -> Dict[str, str]:
        if not self.caller:
            raise ValueError("A caller identity is required for this operation")
        return {CALLER_HEADER: self.caller}

    def _send(self, method, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/api/projects{path}"
        try:
            return method(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Registry request failed: {url}: {e}")
            raise RuntimeError(f"Registry request failed: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            raise RuntimeError(f"Registry returned non-JSON response ({response.status_code})") from e

    def _to_result(self, response: requests.Response) -> OperationResult:
        data = self._json(response)
        if response.ok:
            project = data.get("project")
            return OperationResult(
                ok=True,
                address=data.get("address"),
                project=Project(**project) if project else None,
            )

        code = data.get("code")
        try:
            error = RegistryErrorCode(code)
        except ValueError:
            raise RuntimeError(
                f"Registry error {response.status_code}: {data.get('error', 'unknown error')}"
            ) from None
        return OperationResult.failure(error, address=data.get("address"))

    def initialize_project(self) -> OperationResult:
        return self._to_result(self._send(requests.post, "", headers=self._headers()))

    def add_member(self, address: str, member: str) -> OperationResult:
        return self._to_result(self._send(
            requests.post,
            f"/{address}/members",
            headers=self._headers(),
            json={"member": normalize_identity(member)},
        ))

    def remove_member(self, address: str, member: str) -> OperationResult:
        return self._to_result(self._send(
            requests.delete,
            f"/{address}/members/{normalize_identity(member)}",
            headers=self._headers(),
        ))

    def check_membership(self, address: str, member: str, expected_owner: str) -> OperationResult:
        return self._to_result(self._send(
            requests.get,
            f"/{address}/members/{normalize_identity(member)}",
            params={"expected_owner": normalize_identity(expected_owner)},
        ))

    def get_project(self, address: str) -> Project:
        response = self._send(requests.get, f"/{address}")
        data = self._json(response)
        if not response.ok:
            raise RuntimeError(f"Registry error {response.status_code}: {data.get('error', 'unknown error')}")
        return Project(owner=data["owner"], members=data.get("members", []), address_tag=data.get("address_tag", 0))
