"""Domain models and tool argument schemas.

Pydantic models for everything that crosses a boundary:
- Remote API payloads (envelope, clothing records, task records)
- The task projection returned to MCP callers
- Typed argument structs for each MCP tool

Example:
    from heybeauty_mcp.models import SubmitTryOnArgs

    args = SubmitTryOnArgs.parse({"user_img_url": "https://x/u.jpg"})
    # raises ValidationError("cloth image is required")
"""

from enum import Enum
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from heybeauty_mcp.errors import ValidationError

# =============================================================================
# Remote API Payloads
# =============================================================================


class Envelope(BaseModel):
    """Uniform remote response wrapper ``{code, message, data}``."""

    model_config = ConfigDict(extra="ignore")

    code: int
    message: str = ""
    data: Any = None

    @field_validator("message", mode="before")
    @classmethod
    def _none_message(cls, v: Any) -> Any:
        return "" if v is None else v


class ClothingItem(BaseModel):
    """A clothing catalog entry as served by ``/get-clothes``."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, frozen=True)

    cloth_id: str
    title: str = ""
    description: str = ""
    cloth_img_url: str = ""

    @field_validator("title", "description", "cloth_img_url", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def uri(self) -> str:
        """Resource URI under the ``cloth://`` scheme."""
        return f"cloth:///{self.cloth_id}"


class RemoteTask(BaseModel):
    """Task record from ``/mcp-vton`` and ``/get-task-info``."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    uuid: str = ""
    created_at: str | None = None
    updated_at: str | None = None
    status: str = ""
    tryon_img_url: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_to_str(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


# =============================================================================
# Caller-facing Models
# =============================================================================


class TaskStatus(str, Enum):
    """Task statuses the remote service is known to report."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({TaskStatus.SUCCEEDED.value, TaskStatus.FAILED.value})


class TryOnTask(BaseModel):
    """Projection of a remote try-on task returned to MCP callers.

    ``status`` is passed through unchanged, including values not listed in
    ``TaskStatus``.
    """

    task_id: str
    created_at: str | None = None
    updated_at: str | None = None
    status: str = ""
    tryon_img_url: str = ""

    @classmethod
    def from_remote(cls, record: RemoteTask, task_id: str | None = None) -> "TryOnTask":
        """Build the projection, taking ``task_id`` from ``uuid`` unless given."""
        return cls(
            task_id=record.uuid if task_id is None else task_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
            status=record.status,
            tryon_img_url=record.tryon_img_url or "",
        )

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES


# =============================================================================
# Tool Argument Schemas
# =============================================================================


class ToolArguments(BaseModel):
    """Base for typed tool arguments.

    Every field is a string: missing, null or otherwise falsy values become
    ``""``, ``True`` becomes ``"true"`` and other scalars are stringified.
    Subclasses enforce required fields in ``check``.
    """

    model_config = ConfigDict(extra="ignore")

    tool_name: ClassVar[str] = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_to_str(cls, v: Any) -> str:
        if isinstance(v, str):
            return v
        if not v:
            return ""
        if isinstance(v, bool):
            return "true"
        return str(v)

    def check(self) -> None:
        """Raise ValidationError if a required field is empty."""

    @classmethod
    def parse(cls, arguments: dict[str, Any] | None) -> Self:
        """Parse raw MCP arguments into a checked instance.

        Raises:
            ValidationError: If arguments are not an object or a required
                field is empty
        """
        if arguments is not None and not isinstance(arguments, dict):
            msg = f"{cls.tool_name} arguments must be an object"
            raise ValidationError(msg)
        try:
            parsed = cls.model_validate(arguments or {})
        except PydanticValidationError as e:
            raise ValidationError(f"invalid {cls.tool_name} arguments: {e}") from e
        parsed.check()
        return parsed


class SubmitTryOnArgs(ToolArguments):
    """Arguments of ``submit_tryon_task``."""

    tool_name: ClassVar[str] = "submit_tryon_task"

    user_img_url: str = Field(default="", description="User image url")
    cloth_img_url: str = Field(default="", description="Cloth image url")
    cloth_id: str = Field(default="", description="Cloth id from a cloth resource")
    cloth_description: str = Field(default="", description="Cloth description")

    def check(self) -> None:
        if not self.user_img_url:
            raise ValidationError("user image is required", field="user_img_url")
        if not self.cloth_img_url:
            raise ValidationError("cloth image is required", field="cloth_img_url")


class QueryTryOnArgs(ToolArguments):
    """Arguments of ``query_tryon_task``."""

    tool_name: ClassVar[str] = "query_tryon_task"

    task_id: str = Field(default="", description="Task id from submit_tryon_task")

    def check(self) -> None:
        if not self.task_id:
            raise ValidationError("task id is required", field="task_id")
