import json
import logging
from typing import Optional

import httpx

from core.errors import UpstreamError
from core.services.image_provider import ImageProvider


logger = logging.getLogger(__name__)

STATUS_ERRORS = {
    401: (UpstreamError.AUTH, "API authentication failed. Please verify your ClipDrop API key is correct and active."),
    429: (UpstreamError.RATE_LIMITED, "API rate limit exceeded. Please try again in a few minutes."),
    400: (UpstreamError.BAD_REQUEST, "Invalid request format or parameters."),
    402: (UpstreamError.QUOTA, "API quota exceeded. Please check your ClipDrop account."),
}

CONNECTIVITY_MESSAGE = (
    "Failed to connect to image generation service. Please check your internet connection and try again."
)
TIMEOUT_MESSAGE = "Request timeout. The image generation is taking too long. Please try again."


class ClipdropImageProvider(ImageProvider):
    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://clipdrop-api.co/text-to-image/v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def generate(self, prompt: str) -> bytes:
        # multipart/form-data с единственным полем prompt
        files = {"prompt": (None, prompt)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.api_url, files=files, headers={"x-api-key": self.api_key})
        except httpx.TimeoutException:
            logger.error("ClipDrop request timed out after %ss", self.timeout)
            raise UpstreamError(TIMEOUT_MESSAGE, kind=UpstreamError.TIMEOUT)
        except httpx.TransportError as e:
            logger.error("No response from ClipDrop API: %s", e)
            raise UpstreamError(CONNECTIVITY_MESSAGE, kind=UpstreamError.CONNECTIVITY)

        if resp.status_code >= 400:
            raise map_status_error(resp.status_code, _error_text(resp))
        return resp.content


def map_status_error(status_code: int, detail: str) -> UpstreamError:
    logger.error("ClipDrop API error %s: %s", status_code, detail)
    if status_code in STATUS_ERRORS:
        kind, message = STATUS_ERRORS[status_code]
        return UpstreamError(message, kind=kind, status_code=status_code, details=detail)
    return UpstreamError(f"API error ({status_code}): {detail}", status_code=status_code)


def _error_text(resp: httpx.Response) -> str:
    text = resp.content.decode("utf-8", errors="replace")
    if not text:
        return "Unknown API error"
    try:
        data = json.loads(text)
    except ValueError:
        return text
    if isinstance(data, dict):
        return str(data.get("error") or data.get("message") or text)
    return text
