"""
HTTP client for the Uploads API.

Performs the whole client side of the handshake: request a presigned URL,
PUT the bytes straight to S3, then list, download or delete through the API.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class FilesClientError(Exception):
    """Raised when the API or S3 answers with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _raise_for_status(response, action: str) -> None:
    if response.status_code < 400:
        return
    try:
        message = response.json().get("error", response.text)
    except ValueError:
        message = response.text
    logger.error(f"{action} failed with {response.status_code}: {message}")
    raise FilesClientError(response.status_code, message)


class FilesClient:
    """
    Client for the Uploads API.

    Args:
        api_url: Base URL of the API, e.g. "http://localhost:8000"
        session: Session used for API calls (any requests-compatible session)
        storage_session: Session used for the presigned S3 requests
        timeout: Seconds to wait for each request
    """

    def __init__(
        self,
        api_url: str,
        session: Optional[Any] = None,
        storage_session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.storage_session = storage_session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.api_url}{path}"

    def request_upload(self, file_name: str, file_type: str) -> Dict[str, str]:
        """Ask the API for a presigned upload URL. Returns ``{uploadUrl, fileId, key}``."""
        response = self.session.post(
            self._url("/generate-presigned-url"),
            json={"fileName": file_name, "fileType": file_type},
            timeout=self.timeout,
        )
        _raise_for_status(response, "Requesting upload URL")
        return response.json()

    def upload(
        self,
        path: Union[str, Path],
        file_type: Optional[str] = None,
        file_name: Optional[str] = None,
        confirm: bool = True,
    ) -> str:
        """
        Upload a local file and return its file id.

        The content type is guessed from the file name when not given.
        With ``confirm`` the API is told the upload finished so the record becomes ``uploaded``.
        """
        path = Path(path)
        file_name = file_name or path.name
        file_type = file_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"

        upload = self.request_upload(file_name, file_type)
        self.put_bytes(upload["uploadUrl"], path.read_bytes(), file_type)
        logger.info(f"Uploaded {path} as {upload['fileId']}")

        if confirm:
            self.complete_upload(upload["fileId"])
        return upload["fileId"]

    def put_bytes(self, upload_url: str, content: bytes, file_type: str) -> None:
        """PUT raw bytes to a presigned upload URL with the Content-Type it was signed for."""
        response = self.storage_session.put(
            upload_url,
            data=content,
            headers={"Content-Type": file_type},
            timeout=self.timeout,
        )
        _raise_for_status(response, "Uploading to storage")

    def complete_upload(self, file_id: str) -> Dict[str, Any]:
        response = self.session.post(self._url(f"/files/{file_id}/complete"), timeout=self.timeout)
        _raise_for_status(response, "Confirming upload")
        return response.json()

    def list_files(self) -> List[Dict[str, Any]]:
        response = self.session.get(self._url("/files"), timeout=self.timeout)
        _raise_for_status(response, "Listing files")
        return response.json()

    def get_file(self, file_id: str) -> Dict[str, Any]:
        """File record including a presigned ``downloadUrl``."""
        response = self.session.get(self._url(f"/files/{file_id}"), timeout=self.timeout)
        _raise_for_status(response, "Fetching file")
        return response.json()

    def download(self, file_id: str) -> bytes:
        """Content of an uploaded file, fetched from its presigned download URL."""
        record = self.get_file(file_id)
        response = self.storage_session.get(record["downloadUrl"], timeout=self.timeout)
        _raise_for_status(response, "Downloading from storage")
        return response.content

    def delete_file(self, file_id: str) -> str:
        response = self.session.delete(self._url(f"/files/{file_id}"), timeout=self.timeout)
        _raise_for_status(response, "Deleting file")
        return response.json()["message"]
