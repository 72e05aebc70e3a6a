"""
Tool Registry for Profit Flow.

Manages registration and execution of the functions offered to the LLM.
Each tool publishes an OpenAI function definition (advisory to the model)
and a pydantic model that its arguments are validated against before the
tool runs.
"""

from typing import Dict, List, Any, Optional, Type
from abc import ABC, abstractmethod
import json
import logging

from pydantic import BaseModel, ValidationError

from profit_flow.backend.backend_core.errors import InvalidArguments, MalformedArguments

logger = logging.getLogger(__name__)


class NoArguments(BaseModel):
    pass


class Tool(ABC):
    """Base class for all tools."""

    # Validates the decoded arguments; field names match the JSON schema
    args_model: Type[BaseModel] = NoArguments

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description for LLM."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> Dict[str, Any]:
        """Tool parameters schema (OpenAI function calling format)."""
        pass

    @abstractmethod
    async def execute(self, **kwargs) -> Any:
        """Execute the tool with validated arguments."""
        pass


def parse_arguments(tool: Tool, arguments_json: str) -> Dict[str, Any]:
    """
    Decode and validate a tool call's argument blob.

    Raises:
        MalformedArguments: not JSON, or not a JSON object
        InvalidArguments: fails the tool's args_model
    """
    raw = arguments_json if arguments_json and arguments_json.strip() else "{}"
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedArguments(tool.name, arguments_json, str(e)) from e
    if not isinstance(decoded, dict):
        raise MalformedArguments(tool.name, arguments_json, "arguments must be a JSON object")

    try:
        validated = tool.args_model.model_validate(decoded)
    except ValidationError as e:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}" for err in e.errors()
        )
        raise InvalidArguments(tool.name, reason) from e
    return validated.model_dump()


class ToolRegistry:
    """Registry for managing and executing tools."""

    def __init__(self):
        """Initialize tool registry."""
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool):
        """Register a tool."""
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def get_tool(self, name: str) -> Optional[Tool]:
        """Get a tool by name."""
        return self._tools.get(name)

    async def execute_tool(
        self,
        tool_name: str,
        arguments_json: str,
    ) -> Any:
        """
        Execute a tool with the model's raw JSON arguments.

        Args:
            tool_name: Name of tool to execute
            arguments_json: Argument blob exactly as the model produced it

        Returns:
            Tool execution result

        Raises:
            ValueError: no tool registered under tool_name
            MalformedArguments / InvalidArguments: see parse_arguments
        """
        tool = self.get_tool(tool_name)
        if not tool:
            raise ValueError(f"Tool not found: {tool_name}")

        arguments = parse_arguments(tool, arguments_json)
        logger.info(f"Executing tool: {tool_name} with args: {arguments}")

        return await tool.execute(**arguments)

    def get_function_definitions(self) -> List[Dict[str, Any]]:
        """
        Get OpenAI function calling format definitions for all tools.

        Returns:
            List of function definitions in OpenAI format
        """
        definitions = []
        for tool in self._tools.values():
            definitions.append({
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            })
        return definitions
