import asyncio
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

logger = logging.getLogger(__name__)


class RemoteError(RuntimeError):
    pass


def _decode_body(data: bytes, content_type: Optional[str]) -> str:
    charset = None
    if content_type and "charset=" in content_type:
        charset = content_type.split("charset=")[-1].split(";")[0].strip()

    candidates = []
    if charset:
        candidates.append(charset)
    candidates.extend(["utf-8", "utf-8-sig"])

    for enc in candidates:
        try:
            return data.decode(enc)
        except (LookupError, UnicodeDecodeError):
            continue

    return data.decode("utf-8", errors="replace")


def _operation_name(query: str) -> str:
    tokens = query.split()
    if len(tokens) >= 2 and tokens[0] in ("query", "mutation"):
        return tokens[1].split("(")[0]
    return "anonymous"


class GraphClient:
    """
    Minimal GraphQL-over-HTTP client.

    Requests are plain JSON POSTs; `execute` runs the blocking call in a worker
    thread so callers simply await it. No retries are performed.
    """

    def __init__(self, url: str, api_key: Optional[str] = None, timeout: float = 10.0):
        if not url or not isinstance(url, str):
            raise ValueError("GraphQL endpoint URL is required.")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": "studydesk/1.0",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"api-key {self.api_key}"
        return headers

    def execute_sync(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        operation = _operation_name(query)
        payload = json.dumps({"query": query, "variables": variables or {}}).encode("utf-8")
        request = urllib.request.Request(self.url, data=payload, headers=self._headers(), method="POST")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = getattr(response, "status", None)
                if status and status != 200:
                    logger.error("GraphQL %s failed with status=%s", operation, status)
                    raise RemoteError(f"Unexpected HTTP status: {status}")
                data = response.read()
                content_type = response.headers.get("Content-Type")
        except RemoteError:
            raise
        except urllib.error.HTTPError as exc:
            logger.error("GraphQL %s HTTP error status=%s reason=%s", operation, exc.code, exc.reason)
            raise RemoteError(f"HTTP error: {exc.code}") from exc
        except urllib.error.URLError as exc:
            logger.error("GraphQL %s URL error reason=%s", operation, exc.reason)
            raise RemoteError("Network error while calling the folder service.") from exc
        except TimeoutError as exc:
            logger.error("GraphQL %s timed out after %ss", operation, self.timeout)
            raise RemoteError("Timed out while calling the folder service.") from exc
        except Exception as exc:
            logger.exception("Unexpected GraphQL %s transport error", operation)
            raise RemoteError("Unexpected error while calling the folder service.") from exc

        if not data:
            logger.error("GraphQL %s returned an empty body", operation)
            raise RemoteError("Empty response from the folder service")

        try:
            body = json.loads(_decode_body(data, content_type))
        except json.JSONDecodeError as exc:
            logger.error("GraphQL %s returned invalid JSON: %s", operation, exc)
            raise RemoteError("Invalid JSON from the folder service") from exc

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = "; ".join(str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors)
            logger.error("GraphQL %s rejected: %s", operation, messages)
            raise RemoteError(messages)

        result = body.get("data") if isinstance(body, dict) else None
        if not isinstance(result, dict):
            logger.error("GraphQL %s returned no data", operation)
            raise RemoteError("Folder service returned no data")
        return result

    async def execute(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await asyncio.to_thread(self.execute_sync, query, variables)
