"""Tool declaration and the typed tool contract.

- ToolDefinition / ToolDescriptor: tool metadata and its JSON schema
- ToolArgument / @argument: declared argument shapes
- BaseTool: abstract base class for all tools
- @tool decorator: complete a BaseTool subclass or wrap a function
- AnyTool: type-erased tool for heterogeneous collections
"""

from .argument import EmptyArgument, ToolArgument, argument, decode_argument
from .base import BaseTool
from .decorator import FunctionTool, collect_arguments, tool
from .definition import (
    ArgumentDefinition,
    ArgumentDescriptor,
    ArgumentTypeDescriptor,
    ToolDefinition,
    ToolDescriptor,
    ToolExample,
    build_descriptor,
    infer_type_tag,
)
from .erasure import AnyTool, DecodedTool, LiveTool, erase

__all__ = [
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
    "collect_arguments",
    "AnyTool",
    "LiveTool",
    "DecodedTool",
    "erase",
]
