"""
Meilisearch REST client.

Covers the document operations the sync engine needs: delete-all, add
(insert or replace) and update (upsert by primary key), plus task polling.
"""

import logging
import time
from typing import Any, Dict, Iterator, List, Optional

import requests

from ..errors import MeilisearchError
from .store import DocumentStore, WireDocument

logger = logging.getLogger(__name__)

PRIMARY_KEY = "objectID"
TASK_DONE_STATUSES = ("succeeded", "failed", "canceled")


class MeilisearchClient:
    """
    Thin Meilisearch API client.

    Example:
        >>> client = MeilisearchClient("http://localhost:7700", api_key="master-key")
        >>> index = client.index("docs")
        >>> index.update_documents([{"objectID": "1", "content": "Hello"}])
    """

    def __init__(self, host: str, api_key: Optional[str] = None, timeout: int = 30):
        """
        Initialize Meilisearch client.

        Args:
            host: Meilisearch server URL
            api_key: API key sent as a bearer token
            timeout: Request timeout in seconds
        """
        self.host = host.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @property
    def _headers(self) -> Dict[str, str]:
        """Get authorization headers."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json_data: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an API request.

        Args:
            method: HTTP method
            path: API path (appended to host)
            json_data: JSON body data
            params: Query parameters

        Returns:
            Decoded response body ({} for empty bodies)

        Raises:
            MeilisearchError: If the request fails or the server rejects it
        """
        url = f"{self.host}{path}"

        try:
            response = requests.request(
                method=method,
                url=url,
                json=json_data,
                params=params,
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise MeilisearchError(f"Request failed: {e}") from e

        if not response.ok:
            raise MeilisearchError(
                f"{method} {path} failed with HTTP {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code,
                details=response.text,
            )

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise MeilisearchError(f"Invalid JSON response: {e}", status_code=response.status_code) from e

    def _error_message(self, response: requests.Response) -> str:
        """Pull the message out of a Meilisearch error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or "Unknown error"
        if isinstance(body, dict):
            code = body.get("code")
            message = body.get("message", "Unknown error")
            return f"{message} ({code})" if code else message
        return str(body)

    def health_check(self) -> bool:
        """
        Check if the Meilisearch server is reachable and healthy.

        Returns:
            True if the server reports "available"
        """
        try:
            return self.request("GET", "/health").get("status") == "available"
        except MeilisearchError:
            return False

    def index(self, uid: str, batch_size: int = 0, wait_for_tasks: bool = False) -> "MeilisearchIndex":
        """Document store bound to one index."""
        return MeilisearchIndex(self, uid, batch_size=batch_size, wait_for_tasks=wait_for_tasks)

    def get_task(self, task_uid: int) -> Dict[str, Any]:
        return self.request("GET", f"/tasks/{task_uid}")

    def wait_for_task(self, task_uid: int, timeout: float = 60.0, interval: float = 0.5) -> Dict[str, Any]:
        """
        Poll a task until it finishes.

        Args:
            task_uid: Task id returned by a write request
            timeout: Seconds to wait before giving up
            interval: Seconds between polls

        Returns:
            Final task object

        Raises:
            MeilisearchError: If the task fails, is canceled or does not finish in time
        """
        deadline = time.monotonic() + timeout
        while True:
            task = self.get_task(task_uid)
            status = task.get("status")

            if status == "succeeded":
                return task
            if status in TASK_DONE_STATUSES:
                error = task.get("error") or {}
                raise MeilisearchError(
                    f"Task {task_uid} {status}: {error.get('message', 'no error details')}",
                    details=task,
                )
            if time.monotonic() >= deadline:
                raise MeilisearchError(f"Timed out waiting for task {task_uid} (last status: {status})", details=task)

            time.sleep(interval)


class MeilisearchIndex(DocumentStore):
    """Document operations on a single Meilisearch index."""

    def __init__(
        self,
        client: MeilisearchClient,
        uid: str,
        primary_key: str = PRIMARY_KEY,
        batch_size: int = 0,
        wait_for_tasks: bool = False,
    ):
        self.client = client
        self.uid = uid
        self.primary_key = primary_key
        self.batch_size = batch_size
        self.wait_for_tasks = wait_for_tasks

    @property
    def _documents_path(self) -> str:
        return f"/indexes/{self.uid}/documents"

    def delete_all_documents(self) -> None:
        logger.info(f"Deleting all documents from index {self.uid}")
        task = self.client.request("DELETE", self._documents_path)
        self._finish(task)

    def add_documents(self, documents: List[WireDocument]) -> None:
        self._write_documents("POST", documents)

    def update_documents(self, documents: List[WireDocument]) -> None:
        self._write_documents("PUT", documents)

    def _write_documents(self, method: str, documents: List[WireDocument]) -> None:
        """POST replaces whole documents, PUT merges them into existing ones."""
        if not documents:
            logger.info("No documents to send")
            return

        batches = list(self._batches(documents))
        for batch_num, batch in enumerate(batches, 1):
            task = self.client.request(
                method,
                self._documents_path,
                json_data=batch,
                params={"primaryKey": self.primary_key},
            )
            logger.info(f"Sent batch {batch_num}/{len(batches)}: {len(batch)} documents to index {self.uid}")
            self._finish(task)

    def _batches(self, documents: List[WireDocument]) -> Iterator[List[WireDocument]]:
        if not self.batch_size:
            yield documents
            return
        for i in range(0, len(documents), self.batch_size):
            yield documents[i : i + self.batch_size]

    def _finish(self, task: Dict[str, Any]) -> None:
        """Wait for an enqueued task when configured to."""
        task_uid = task.get("taskUid", task.get("uid"))
        if self.wait_for_tasks and task_uid is not None:
            self.client.wait_for_task(task_uid, timeout=max(self.client.timeout, 1) * 4)
