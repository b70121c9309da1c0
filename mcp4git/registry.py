"""
Tool registry and dispatcher for MCP4Git.

The registry owns the tool descriptors, validates incoming arguments against
each tool's input schema, fills in configured defaults and turns every
outcome, including unexpected exceptions, into an MCP tool result.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import config
from .outcomes import ErrorKind, ToolOutcome
from .tools import TOOLS, TOOL_FUNCTIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefaults:
    """Values substituted for omitted arguments, fixed at startup."""

    owner: str
    branch: str = "main"

    @classmethod
    def from_config(cls) -> "ToolDefaults":
        return cls(owner=config.github_username, branch=config.default_branch)


@dataclass(frozen=True)
class ToolDescriptor:
    """A registered tool."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: Callable[..., ToolOutcome]
    config_defaults: Dict[str, str] = field(default_factory=dict)
    argument_names: Dict[str, str] = field(default_factory=dict)


class ArgumentError(ValueError):
    """Raised when tool arguments do not match the input schema."""


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda value: isinstance(value, str),
    "boolean": lambda value: isinstance(value, bool),
    "integer": _is_integer,
    "number": lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
    "array": lambda value: isinstance(value, list),
    "object": lambda value: isinstance(value, dict),
}


def text_result(text: str) -> Dict[str, Any]:
    """Build the wire-level tool result with a single text block."""
    return {"content": [{"type": "text", "text": text}]}


class ToolRegistry:
    """Registry for all tools exposed over MCP."""

    def __init__(self, defaults: ToolDefaults):
        self.defaults = defaults
        self.tools: Dict[str, ToolDescriptor] = {}

    def register(self, descriptor: ToolDescriptor) -> None:
        """Add a tool. Names are unique; registration happens once at startup."""
        if descriptor.name in self.tools:
            raise ValueError(f"Tool '{descriptor.name}' is already registered")
        for param in descriptor.config_defaults.values():
            if not hasattr(self.defaults, param):
                raise ValueError(f"Tool '{descriptor.name}' refers to unknown default '{param}'")
        self.tools[descriptor.name] = descriptor
        logger.debug(f"Registered tool {descriptor.name}")

    def get_tool(self, name: str) -> Optional[ToolDescriptor]:
        return self.tools.get(name)

    def normalized_schema(self, descriptor: ToolDescriptor) -> Dict[str, Any]:
        """Input schema with configured defaults resolved into each property."""
        properties = {}
        for param, param_schema in descriptor.input_schema.get("properties", {}).items():
            param_schema = dict(param_schema)
            if param in descriptor.config_defaults:
                param_schema["default"] = getattr(self.defaults, descriptor.config_defaults[param])
            properties[param] = param_schema

        return {
            "type": "object",
            "properties": properties,
            "required": list(descriptor.input_schema.get("required", [])),
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        """Describe every tool for clients: name, description and input schema."""
        return [
            {
                "name": descriptor.name,
                "description": descriptor.description,
                "inputSchema": self.normalized_schema(descriptor),
            }
            for descriptor in self.tools.values()
        ]

    def validate_arguments(self, descriptor: ToolDescriptor, raw_args: Any) -> Dict[str, Any]:
        """
        Check arguments against the tool's schema and apply defaults.

        Args:
            descriptor: The tool being invoked
            raw_args: Arguments as received from the client

        Returns:
            Keyword arguments for the handler, keyed by Python parameter name

        Raises:
            ArgumentError: If a required field is missing or a value is invalid
        """
        if raw_args is None:
            raw_args = {}
        if not isinstance(raw_args, Mapping):
            raise ArgumentError("arguments must be an object")

        properties = descriptor.input_schema.get("properties", {})
        required = set(descriptor.input_schema.get("required", []))

        unknown = set(raw_args) - set(properties)
        if unknown:
            logger.debug(f"Ignoring unknown arguments for {descriptor.name}: {sorted(unknown)}")

        arguments: Dict[str, Any] = {}
        for param, param_schema in properties.items():
            value = raw_args.get(param)

            if value is None:
                if param in descriptor.config_defaults:
                    value = getattr(self.defaults, descriptor.config_defaults[param])
                elif "default" in param_schema:
                    value = param_schema["default"]
                elif param in required:
                    raise ArgumentError(f"missing required argument '{param}'")
                else:
                    continue
            else:
                value = self._check_value(param, param_schema, value)

            arguments[descriptor.argument_names.get(param, param)] = value

        return arguments

    @staticmethod
    def _check_value(param: str, param_schema: Dict[str, Any], value: Any) -> Any:
        expected = param_schema.get("type")
        check = _TYPE_CHECKS.get(expected)
        if check is not None and not check(value):
            raise ArgumentError(
                f"argument '{param}' must be of type {expected}, got {type(value).__name__}"
            )

        if expected == "integer":
            value = int(value)
            # Page sizes are clamped rather than rejected
            if "minimum" in param_schema:
                value = max(param_schema["minimum"], value)
            if "maximum" in param_schema:
                value = min(param_schema["maximum"], value)

        if "enum" in param_schema and value not in param_schema["enum"]:
            allowed = ", ".join(repr(option) for option in param_schema["enum"])
            raise ArgumentError(f"argument '{param}' must be one of {allowed}, got {value!r}")

        return value

    def invoke(self, name: str, raw_args: Any) -> Dict[str, Any]:
        """
        Validate arguments, run the tool and return its MCP result.

        Never raises: unknown tools, invalid arguments and handler failures
        all come back as a text block describing the problem.
        """
        descriptor = self.tools.get(name)
        if descriptor is None:
            logger.error(f"Unknown tool requested: {name}")
            outcome = ToolOutcome.failure(
                ErrorKind.INVALID_ARGUMENTS,
                f"❌ Error: Unknown tool '{name}'. Available tools: {', '.join(self.tools)}",
            )
            return self.to_result(outcome)

        try:
            arguments = self.validate_arguments(descriptor, raw_args)
        except ArgumentError as e:
            logger.warning(f"Rejected arguments for {name}: {e}")
            outcome = ToolOutcome.failure(
                ErrorKind.INVALID_ARGUMENTS, f"❌ Error: Invalid arguments for '{name}': {e}"
            )
            return self.to_result(outcome)

        logger.info(f"Invoking tool {name}")
        try:
            outcome = descriptor.handler(**arguments)
        except Exception as e:
            logger.exception(f"Tool {name} failed unexpectedly")
            outcome = ToolOutcome.failure(
                ErrorKind.UNKNOWN,
                f"❌ Error: Unknown error occurred while running '{name}': {e}",
            )

        if not isinstance(outcome, ToolOutcome):
            logger.error(f"Tool {name} returned {type(outcome).__name__} instead of an outcome")
            outcome = ToolOutcome.failure(
                ErrorKind.UNKNOWN,
                f"❌ Error: Unknown error occurred while running '{name}': no result was produced",
            )

        if outcome.ok:
            logger.info(f"Tool {name} completed")
        else:
            logger.warning(f"Tool {name} failed ({outcome.kind.value})")
        return self.to_result(outcome)

    @staticmethod
    def to_result(outcome: ToolOutcome) -> Dict[str, Any]:
        return text_result(outcome.text or "(no output)")


def build_registry(defaults: Optional[ToolDefaults] = None) -> ToolRegistry:
    """Create a registry holding every GitHub tool."""
    registry = ToolRegistry(defaults or ToolDefaults.from_config())
    for tool in TOOLS:
        registry.register(
            ToolDescriptor(
                name=tool["name"],
                description=tool["description"],
                input_schema=tool["parameters"],
                handler=TOOL_FUNCTIONS[tool["name"]],
                config_defaults=tool.get("config_defaults", {}),
                argument_names=tool.get("argument_names", {}),
            )
        )

    logger.info(f"Registered {len(registry.tools)} tools")
    return registry
