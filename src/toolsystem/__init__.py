"""Toolsystem - Typed tools with self-describing descriptors and dynamic dispatch.

Declare tools with typed argument shapes, publish a stable JSON descriptor
for each one, and route loosely typed tool calls from an AI agent or remote
API to their implementations.

Quick Start (Class-Based):
    >>> from toolsystem import BaseTool, Number, ToolArgument, argument, tool
    >>>
    >>> @tool("square_root", "Calculate the square root of a number")
    ... class SquareRootTool(BaseTool["SquareRootTool.Input"]):
    ...     @argument("number", "The number to take the square root of", example="16.0")
    ...     class Input(ToolArgument):
    ...         value: float
    ...
    ...     async def call(self, arguments):
    ...         return Number(self.first_argument(arguments).value ** 0.5)
    >>>
    >>> print(SquareRootTool.json_description)
    {
      "arguments": [
        {
          "description": "The number to take the square root of",
          "name": "number",
          "type": {
            "type": "number"
          }
        }
      ],
      ...
    }

Function-Based:
    >>> @tool("greet", "Greet someone by name", arguments=(NameArgument,))
    ... async def greet(arguments):
    ...     return Text(f"Hello, {arguments[0].name}!")

Dispatch:
    >>> from toolsystem import ToolResponse, get_registry
    >>>
    >>> registry = get_registry()
    >>> registry.register_tool(SquareRootTool())
    >>> response = ToolResponse.from_json(
    ...     '{"message": "ok", "tool": {"tool_name": "square_root", "arguments": {"number": 16}}}'
    ... )
    >>> await registry.handle_response(response)
    '4.0'

Outputs:
    >>> from toolsystem.codec import dumps
    >>> dumps(Map({"name": "John", "age": 30}))
    b'{"type":"dictionary","value":{"name":"John","age":30}}'
"""

from .codec import Codec, MsgpackCodec, OrjsonCodec, get_codec, register_codec
from .core import (
    AnyTool,
    ArgumentDefinition,
    ArgumentDescriptor,
    ArgumentTypeDescriptor,
    BaseTool,
    DecodedTool,
    EmptyArgument,
    FunctionTool,
    LiveTool,
    ToolArgument,
    ToolDefinition,
    ToolDescriptor,
    ToolExample,
    argument,
    build_descriptor,
    decode_argument,
    erase,
    infer_type_tag,
    tool,
)
from .errors import (
    DecodeError,
    ErrorCode,
    ExecutionFailed,
    InvalidArgumentType,
    MissingExampleError,
    NoArguments,
    ToolError,
    UnknownTool,
)
from .log import configure_logging, get_logger
from .registry import (
    ToolCall,
    ToolHandler,
    ToolRegistry,
    ToolResponse,
    get_registry,
    reset_registry,
    set_registry,
)
from .settings import ToolSystemSettings, clear_settings_cache, get_settings
from .value import Binary, Boolean, Integer, List, Map, MapList, Number, Text, Value, from_python

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Values
    "Value",
    "Text",
    "Number",
    "Integer",
    "Boolean",
    "Binary",
    "List",
    "Map",
    "MapList",
    "from_python",
    # Declaration
    "ToolDefinition",
    "ArgumentDefinition",
    "ArgumentTypeDescriptor",
    "ArgumentDescriptor",
    "ToolExample",
    "ToolDescriptor",
    "infer_type_tag",
    "build_descriptor",
    "ToolArgument",
    "EmptyArgument",
    "argument",
    "decode_argument",
    "BaseTool",
    "FunctionTool",
    "tool",
    # Type erasure
    "AnyTool",
    "LiveTool",
    "DecodedTool",
    "erase",
    # Dispatch
    "ToolCall",
    "ToolResponse",
    "ToolHandler",
    "ToolRegistry",
    "get_registry",
    "set_registry",
    "reset_registry",
    # Errors
    "ErrorCode",
    "ToolError",
    "NoArguments",
    "InvalidArgumentType",
    "ExecutionFailed",
    "UnknownTool",
    "DecodeError",
    "MissingExampleError",
    # Codecs
    "Codec",
    "OrjsonCodec",
    "MsgpackCodec",
    "get_codec",
    "register_codec",
    # Settings & logging
    "ToolSystemSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
    "get_logger",
]
