"""Tool handlers exposed to calling agents."""

import json
import logging
from typing import Any, Dict, List, Optional

from .client import DAV_METHODS, DEPTH_VALUES, DavClient, DavRequestError
from .config import ConfigError, Settings
from .presets import PresetRegistry, PropertyPreset, merge_properties, to_request_body
from .presets.validator import validate_properties

logger = logging.getLogger(__name__)

ToolResult = Dict[str, Any]

class UnknownToolError(Exception):
    """The requested tool does not exist."""
    pass

_PROPERTY_SCHEMA = {
    "type": "object",
    "properties": {
        "namespace": {"type": "string"},
        "name": {"type": "string"},
    },
    "required": ["namespace", "name"],
}

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "dav_request",
        "description": "Make a WebDAV request to the configured server. Supports property presets for PROPFIND.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "method": {
                    "type": "string",
                    "enum": list(DAV_METHODS),
                    "description": "The WebDAV HTTP method to use",
                },
                "path": {
                    "type": "string",
                    "description": "The path on the WebDAV server (relative to the base URL)",
                },
                "body": {
                    "type": "string",
                    "description": "The request body (typically XML for WebDAV operations). Ignored if preset provided.",
                },
                "headers": {
                    "type": "object",
                    "description": "Additional headers to include in the request",
                    "additionalProperties": {"type": "string"},
                },
                "depth": {
                    "type": "string",
                    "enum": list(DEPTH_VALUES),
                    "description": "Depth header for PROPFIND requests (0 = resource only, 1 = resource + immediate children, infinity = all)",
                },
                "preset": {
                    "type": "string",
                    "description": "Optional property preset name for PROPFIND (e.g. 'basic', 'detailed'). If provided, XML body is auto-generated.",
                },
                "additionalProperties": {
                    "type": "array",
                    "description": "Extra properties to include in addition to the preset (objects with namespace & name).",
                    "items": _PROPERTY_SCHEMA,
                },
            },
            "required": ["method", "path"],
        },
    },
    {
        "name": "list_property_presets",
        "description": "List available property presets (built-in and user-defined).",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "get_property_preset",
        "description": "Get full definition of a property preset.",
        "inputSchema": {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"],
        },
    },
]

def text_result(payload: Any, is_error: bool = False) -> ToolResult:
    """Wrap a JSON-serialisable payload as a tool result."""
    result: ToolResult = {
        "content": [{"type": "text", "text": json.dumps(payload, indent=2)}],
    }
    if is_error:
        result["isError"] = True
    return result

_OPTIONAL_STRING_ARGUMENTS = ("body", "depth", "preset")

def _check_request_arguments(arguments: Dict[str, Any]) -> Optional[str]:
    """Return a message describing the first ill-typed dav_request argument, if any."""
    for key in ("method", "path"):
        if not isinstance(arguments.get(key), str):
            return f"'{key}' must be a string"
    for key in _OPTIONAL_STRING_ARGUMENTS:
        value = arguments.get(key)
        if value is not None and not isinstance(value, str):
            return f"'{key}' must be a string"
    headers = arguments.get("headers")
    if headers is not None:
        if not isinstance(headers, dict):
            return "'headers' must be an object"
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in headers.items()):
            return "'headers' names and values must be strings"
    return None

class DavTools:
    """Dispatches tool calls to the preset registry and the WebDAV client."""

    def __init__(self, registry: PresetRegistry, settings: Settings, client: Optional[DavClient] = None):
        self.registry = registry
        self.settings = settings
        self._client = client
        self._handlers = {
            "dav_request": self.dav_request,
            "list_property_presets": self.list_property_presets,
            "get_property_preset": self.get_property_preset,
        }

    @property
    def client(self) -> DavClient:
        """WebDAV client, created from settings on first use."""
        if self._client is None:
            self._client = DavClient.from_settings(self.settings)
        return self._client

    def list_tools(self) -> List[Dict[str, Any]]:
        return TOOL_DEFINITIONS

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Run a tool by name.

        Failures inside a handler are logged and reported as error results
        so one bad call does not take the server down.

        Raises:
            UnknownToolError: If no tool has that name
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(f"Unknown tool: {name}")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return text_result({"error": "Tool arguments must be an object"}, is_error=True)
        try:
            return handler(arguments)
        except Exception as e:
            logger.exception(f"Tool {name} failed")
            return text_result({"error": f"Internal error in {name}: {e}"}, is_error=True)

    def list_property_presets(self, arguments: Dict[str, Any]) -> ToolResult:
        descriptors = self.registry.list_descriptors()
        return text_result({"presets": [d.to_dict() for d in descriptors]})

    def get_property_preset(self, arguments: Dict[str, Any]) -> ToolResult:
        name = arguments.get("name")
        lookup = self.registry.lookup(name if isinstance(name, str) else "")
        if not lookup.found:
            return text_result(
                {"error": f"Preset '{name}' not found", "available": lookup.available},
                is_error=True,
            )
        return text_result(lookup.preset.to_dict())

    def build_preset_body(self, preset: PropertyPreset, additional_properties: Optional[List[Any]] = None) -> str:
        """Compile a preset plus extra properties into a PROPFIND body.

        Caller supplied properties go through the same validation as preset
        files; invalid ones are dropped.
        """
        if not isinstance(additional_properties, list):
            additional_properties = []
        extra = validate_properties(additional_properties)
        dropped = len(additional_properties) - len(extra)
        if dropped:
            logger.warning(f"Dropped {dropped} invalid additional properties for preset '{preset.name}'")
        return to_request_body(merge_properties(preset.properties, extra))

    def dav_request(self, arguments: Dict[str, Any]) -> ToolResult:
        problem = _check_request_arguments(arguments)
        if problem:
            return text_result({"error": problem}, is_error=True)

        method = arguments["method"].upper()
        path = arguments["path"]
        body = arguments.get("body")
        preset_name = arguments.get("preset")

        try:
            if method == "PROPFIND" and preset_name:
                lookup = self.registry.lookup(preset_name)
                if not lookup.found:
                    return text_result(
                        {"error": f"Unknown preset '{preset_name}'", "available": lookup.available},
                        is_error=True,
                    )
                body = self.build_preset_body(lookup.preset, arguments.get("additionalProperties"))

            response = self.client.request(
                method,
                path,
                body=body,
                headers=arguments.get("headers"),
                depth=arguments.get("depth"),
            )
        except (ConfigError, DavRequestError, ValueError) as e:
            return text_result({"error": str(e)}, is_error=True)

        payload = response.to_dict()
        if preset_name:
            payload["usedPreset"] = preset_name
        return text_result(payload)
