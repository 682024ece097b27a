# docvault/client.py
"""HTTP client for the docvault API.

Example::

    with DocumentsClient("http://localhost:5000") as client:
        record = client.upload_document(Path("report.pdf"))
        client.download_document(record["id"], Path("downloads"))
"""
import mimetypes
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import unquote

import httpx

from .utils.files import PDF_EXTENSION, PDF_MEDIA_TYPE

DEFAULT_BASE_URL = "http://localhost:5000"

_FILENAME_STAR = re.compile(r"filename\*\s*=\s*(?:utf-8|UTF-8)''([^;]+)")
_FILENAME = re.compile(r'filename\s*=\s*"?([^";]+)"?')


class DocumentsClientError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def filename_from_disposition(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    match = _FILENAME_STAR.search(header)
    if match:
        return unquote(match.group(1).strip())
    match = _FILENAME.search(header)
    if match:
        return match.group(1).strip()
    return None


def guess_media_type(path: Path) -> str:
    if path.suffix.lower() == PDF_EXTENSION:
        return PDF_MEDIA_TYPE
    return mimetypes.guess_type(path.name)[0] or "application/octet-stream"


class DocumentsClient:
    """Thin wrapper over the documents endpoints.

    Pass ``http_client`` to reuse an existing ``httpx.Client`` (its base URL
    is used as is); otherwise one is created for ``base_url``.
    """

    def __init__(
            self,
            base_url: str = DEFAULT_BASE_URL,
            http_client: Optional[httpx.Client] = None,
            timeout: float = 30.0
    ):
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "DocumentsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def health(self) -> Dict[str, Any]:
        return self._json(self._http.get("/health"), "Health check failed")

    def list_documents(self) -> List[Dict[str, Any]]:
        return self._json(self._http.get("/documents"), "Failed to fetch documents")

    def upload_document(self, path: Union[str, Path], media_type: Optional[str] = None) -> Dict[str, Any]:
        path = Path(path)
        with path.open("rb") as handle:
            response = self._http.post(
                "/documents/upload",
                files={"file": (path.name, handle, media_type or guess_media_type(path))}
            )
        return self._json(response, "Failed to upload document")

    def upload_bytes(self, filename: str, content: bytes, media_type: str = PDF_MEDIA_TYPE) -> Dict[str, Any]:
        response = self._http.post(
            "/documents/upload",
            files={"file": (filename, content, media_type)}
        )
        return self._json(response, "Failed to upload document")

    def download_document(self, document_id: int, destination: Union[str, Path]) -> Path:
        """Stream a document to disk; a directory destination keeps the server's filename"""
        destination = Path(destination)

        with self._http.stream("GET", f"/documents/{document_id}") as response:
            if response.is_error:
                response.read()
                self._raise_for_status(response, "Failed to download document")

            if destination.is_dir():
                filename = filename_from_disposition(response.headers.get("content-disposition"))
                destination = destination / Path(filename or f"document-{document_id}.pdf").name

            with destination.open("wb") as handle:
                for chunk in response.iter_bytes():
                    handle.write(chunk)

        return destination

    def delete_document(self, document_id: int) -> Dict[str, Any]:
        return self._json(self._http.delete(f"/documents/{document_id}"), "Failed to delete document")

    def _json(self, response: httpx.Response, fallback_message: str) -> Any:
        self._raise_for_status(response, fallback_message)
        return response.json()

    @staticmethod
    def _raise_for_status(response: httpx.Response, fallback_message: str) -> None:
        if not response.is_error:
            return

        message = fallback_message
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = body["message"]
        raise DocumentsClientError(response.status_code, message)
