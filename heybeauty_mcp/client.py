"""HeyBeauty remote API client.

Stateless async wrapper over the three HeyBeauty endpoints used for virtual
try-on. Every call is a single ``POST`` with bearer-token auth whose JSON
response is wrapped in a ``{code, message, data}`` envelope; ``unwrap`` turns
that envelope into the payload or a typed error.

Example:
    client = HeyBeautyClient(api_key="hb-...")
    task = await client.submit_task(
        user_img_url="https://example.com/me.jpg",
        cloth_img_url="https://example.com/shirt.jpg",
    )
    task = await client.query_task(task.task_id)
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from heybeauty_mcp.errors import RemoteError, TransportError, ValidationError
from heybeauty_mcp.models import ClothingItem, Envelope, RemoteTask, TryOnTask

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_BASE_URL = "https://heybeauty.ai/api"
DEFAULT_TIMEOUT_SECONDS = 30.0

LIST_CLOTHES_PATH = "/get-clothes"
SUBMIT_TASK_PATH = "/mcp-vton"
QUERY_TASK_PATH = "/get-task-info"

# The catalog is served as a single fixed window.
CLOTHES_PAGE = 1
CLOTHES_LIMIT = 10

# Fixed submit fields expected by the remote API.
TRYON_CATEGORY = "1"
TRYON_IS_SYNC = "0"


def unwrap(payload: Any, shape: type[T]) -> T:
    """Unwrap a response envelope into data of the expected shape.

    Args:
        payload: Decoded JSON response body
        shape: Type the ``data`` member is validated against

    Returns:
        Envelope ``data`` validated as ``shape``

    Raises:
        RemoteError: If ``code`` is non-zero (message is the remote message
            verbatim) or the payload is not a well-formed envelope
    """
    try:
        envelope = Envelope.model_validate(payload)
    except PydanticValidationError as e:
        msg = f"malformed response envelope: {e.error_count()} validation error(s)"
        raise RemoteError(msg) from e

    if envelope.code != 0:
        raise RemoteError(envelope.message, remote_code=envelope.code)

    try:
        return TypeAdapter(shape).validate_python(envelope.data)
    except PydanticValidationError as e:
        msg = f"malformed response data: {e.error_count()} validation error(s)"
        raise RemoteError(msg) from e


class HeyBeautyClient:
    """Client for the HeyBeauty try-on API.

    Holds no state besides its settings; each call opens and closes its own
    ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            api_key: API key issued by heybeauty.ai, sent as a bearer token
            base_url: API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"HeyBeautyClient(base_url={self.base_url!r})"

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        """POST a JSON body and return the decoded response.

        Raises:
            TransportError: If no response arrives or its status is not 2xx
            RemoteError: If a 2xx body is not valid JSON
        """
        headers = {"Authorization": f"Bearer {self._api_key}"}
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
                response = await http.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            msg = f"request to {path} failed: {e}"
            raise TransportError(msg) from e

        if not response.is_success:
            logger.warning("POST %s returned HTTP %s", url, response.status_code)
            raise TransportError.from_status(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            msg = f"invalid JSON in response from {path}"
            raise RemoteError(msg) from e

    async def list_clothes(self) -> list[ClothingItem]:
        """Fetch the clothing catalog (first page only)."""
        body = {"page": CLOTHES_PAGE, "limit": CLOTHES_LIMIT}
        payload = await self._post(LIST_CLOTHES_PATH, body)
        clothes = unwrap(payload, list[ClothingItem])
        logger.debug("Fetched %s clothing items", len(clothes))
        return clothes

    async def submit_task(
        self,
        user_img_url: str,
        cloth_img_url: str,
        cloth_id: str | None = None,
        cloth_description: str | None = None,
    ) -> TryOnTask:
        """Submit an asynchronous try-on task.

        Args:
            user_img_url: URL of the user's photo
            cloth_img_url: URL of the clothing image
            cloth_id: Catalog id, sent only if given
            cloth_description: Sent as ``caption`` only if given

        Returns:
            Task projection, ``task_id`` taken from the remote ``uuid``

        Raises:
            ValidationError: If either image URL is empty
            TransportError: On non-2xx status
            RemoteError: On non-zero envelope code
        """
        if not user_img_url or not cloth_img_url:
            msg = "user_img_url and cloth_img_url are required"
            raise ValidationError(msg)

        body: dict[str, Any] = {
            "user_img_url": user_img_url,
            "cloth_img_url": cloth_img_url,
            "category": TRYON_CATEGORY,
            "is_sync": TRYON_IS_SYNC,
        }
        if cloth_id:
            body["cloth_id"] = cloth_id
        if cloth_description:
            body["caption"] = cloth_description

        payload = await self._post(SUBMIT_TASK_PATH, body)
        task = TryOnTask.from_remote(unwrap(payload, RemoteTask))
        logger.info("Submitted try-on task %s (status=%s)", task.task_id, task.status)
        return task

    async def query_task(self, task_id: str) -> TryOnTask:
        """Query a try-on task by id.

        The returned ``task_id`` is always the one passed in.
        """
        if not task_id:
            msg = "task_id is required"
            raise ValidationError(msg, field="task_id")

        payload = await self._post(QUERY_TASK_PATH, {"task_uuid": task_id})
        task = TryOnTask.from_remote(unwrap(payload, RemoteTask), task_id=task_id)
        logger.debug("Task %s status=%s", task_id, task.status)
        return task
