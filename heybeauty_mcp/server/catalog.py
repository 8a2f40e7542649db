"""Static tool and prompt catalog.

Descriptors are plain data so the handler layer only has to wrap them in
``mcp.types`` objects.
"""

from typing import Any

from heybeauty_mcp.models import TaskStatus

SUBMIT_TOOL = "submit_tryon_task"
QUERY_TOOL = "query_tryon_task"
TRYON_PROMPT = "tryon_cloth"

RESOURCE_MIME_TYPE = "text/plain"

POLL_INTERVAL_SECONDS = 5

TOOL_CATALOG: dict[str, dict[str, Any]] = {
    SUBMIT_TOOL: {
        "description": "Submit a tryon task with user image url and cloth image url",
        "parameters": {
            "type": "object",
            "properties": {
                "user_img_url": {
                    "type": "string",
                    "description": "User image url, should be a url of a picture",
                },
                "cloth_img_url": {
                    "type": "string",
                    "description": (
                        "Cloth image url, should be a url of a picture, "
                        "user input or get from the selected cloth resource"
                    ),
                },
                "cloth_id": {
                    "type": "string",
                    "description": "Cloth id, get from the selected cloth resource",
                },
                "cloth_description": {
                    "type": "string",
                    "description": (
                        "Cloth description, user input or get from the selected cloth resource"
                    ),
                },
            },
            "required": ["user_img_url", "cloth_img_url"],
        },
    },
    QUERY_TOOL: {
        "description": "Query a tryon task with task id",
        "parameters": {
            "type": "object",
            "properties": {
                "task_id": {
                    "type": "string",
                    "description": f"Task id, get from the {SUBMIT_TOOL} tool",
                },
            },
            "required": ["task_id"],
        },
    },
}

PROMPT_CATALOG: dict[str, dict[str, Any]] = {
    TRYON_PROMPT: {
        "description": "Tryon with user image and cloth image",
    },
}

TRYON_PROMPT_TEXT = f"""You are a helpful assistant that helps users try on clothes virtually. When a user provides their photo URL and either:
1. A clothing image URL they want to try on, or
2. Selects a clothing item from the available resources

Here's how to handle each case:

1. If the user provides their own clothing image URL:
   - Use the {SUBMIT_TOOL} tool with:
     - user_img_url: The URL of the user's photo
     - cloth_img_url: The URL of the clothing image provided by the user
   - cloth_id and cloth_description can be left empty

2. If the user selects a clothing item from resources:
   - Use the {SUBMIT_TOOL} tool with:
     - user_img_url: The URL of the user's photo
     - cloth_img_url: The URL from the selected cloth resource
     - cloth_id: The ID from the selected cloth resource
     - cloth_description: The description from the selected cloth resource

After submitting the task:
- Get the task_id from the response
- Use the {QUERY_TOOL} tool every {POLL_INTERVAL_SECONDS} seconds to check the task status
- Continue checking until the task status is either "{TaskStatus.SUCCEEDED.value}" or "{TaskStatus.FAILED.value}"
- If successful, display the tryon_img_url in markdown format: ![Try-on Result](tryon_img_url)
- If failed, inform the user about the failure

Throughout the process:
- Keep the user informed about the current status
- Be patient and friendly
- Handle any errors gracefully

Here is the user's photo URL and either their clothing image URL or the selected clothing item:"""
