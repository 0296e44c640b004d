"""
File System Tools
=================

Tools that let the agent explore and change a project on local disk:
- list_directory: List the entries of a directory
- read_file: Read a text file
- create_file: Create a new file (refuses to overwrite)
- edit_file: Replace the content of a file

All disk access goes through a FileSystemProvider. A provider is either
read-only or read-write, so the same tool code can be registered with
different permissions:

    registry.register(ReadFileTool(READ_ONLY))
    registry.register(EditFileTool(READ_WRITE))
"""

from pathlib import Path
from typing import Any

from agentloop.tools import (
    Tool,
    ToolArgumentError,
    ToolError,
    ToolResult,
    ToolSuccess,
    require_str,
)
from agentloop.utils.logger import Logger

logger = Logger("FileTools")

WRITE_NOT_PERMITTED = "Write operations are not permitted with this file system provider"


class FileSystemError(Exception):
    """A file system operation failed."""


class FileSystemProvider:
    """
    Thin wrapper around local disk access.

    Attributes:
        can_write: Whether write_file is allowed
    """

    def __init__(self, can_write: bool):
        self.can_write = can_write

    def list_directory(self, path: str) -> list[str]:
        """
        List entry names in a directory, sorted.

        Raises:
            FileSystemError: If the path is missing or not a directory
        """
        directory = Path(path)
        if not directory.exists():
            raise FileSystemError(f"Directory does not exist: {path}")
        if not directory.is_dir():
            raise FileSystemError(f"Path is not a directory: {path}")

        try:
            return sorted(entry.name for entry in directory.iterdir())
        except OSError as e:
            raise FileSystemError(str(e)) from e

    def read_file(self, path: str) -> str:
        file = Path(path)
        if not file.exists():
            raise FileSystemError(f"File does not exist: {path}")

        try:
            return file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileSystemError(str(e)) from e

    def write_file(self, path: str, content: str) -> None:
        if not self.can_write:
            raise FileSystemError("Write operation not permitted")

        try:
            Path(path).write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileSystemError(str(e)) from e

    def __repr__(self) -> str:
        mode = "read-write" if self.can_write else "read-only"
        return f"FileSystemProvider({mode})"


READ_ONLY = FileSystemProvider(can_write=False)
READ_WRITE = FileSystemProvider(can_write=True)


def _path_schema(path_description: str, content_description: str | None = None) -> dict:
    properties: dict[str, Any] = {
        "path": {"type": "string", "description": path_description},
    }
    required = ["path"]

    if content_description is not None:
        properties["content"] = {"type": "string", "description": content_description}
        required.append("content")

    return {"type": "object", "properties": properties, "required": required}


class ListDirectoryTool(Tool):
    name = "list_directory"
    description = "Lists all files and directories in the specified path"
    parameters = _path_schema("The directory path to list")

    def __init__(self, file_system: FileSystemProvider):
        self.file_system = file_system

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        try:
            path = require_str(args, "path")
        except ToolArgumentError as e:
            return ToolError(str(e))

        try:
            entries = self.file_system.list_directory(path)
        except FileSystemError as e:
            return ToolError(f"Failed to list directory: {e}")

        listing = "\n".join(f"- {entry}" for entry in entries)
        return ToolSuccess(f"Contents of {path}:\n{listing}")


class ReadFileTool(Tool):
    name = "read_file"
    description = "Reads the contents of a file at the specified path"
    parameters = _path_schema("The file path to read")

    def __init__(self, file_system: FileSystemProvider):
        self.file_system = file_system

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        try:
            path = require_str(args, "path")
        except ToolArgumentError as e:
            return ToolError(str(e))

        try:
            content = self.file_system.read_file(path)
        except FileSystemError as e:
            return ToolError(f"Failed to read file: {e}")

        return ToolSuccess(f"File content of {path}:\n```\n{content}\n```")


class CreateFileTool(Tool):
    """Creates a new file, making parent directories as needed."""

    name = "create_file"
    description = "Creates a new file with the specified content"
    parameters = _path_schema("The file path to create", "The content for the new file")

    def __init__(self, file_system: FileSystemProvider):
        self.file_system = file_system

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        try:
            path = require_str(args, "path")
            content = require_str(args, "content")
        except ToolArgumentError as e:
            return ToolError(str(e))

        if not self.file_system.can_write:
            return ToolError(WRITE_NOT_PERMITTED)

        file = Path(path)
        if file.exists():
            return ToolError(
                f"File already exists: {path}. Use edit_file to modify existing files."
            )

        try:
            file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return ToolError(f"Failed to create file: {e}")

        try:
            self.file_system.write_file(path, content)
        except FileSystemError as e:
            return ToolError(f"Failed to create file: {e}")

        logger.info(f"Created file: {path}")
        return ToolSuccess(f"Successfully created file: {path}")


class EditFileTool(Tool):
    """Replaces the whole content of a file."""

    name = "edit_file"
    description = "Edits a file by replacing its content with new content"
    parameters = _path_schema("The file path to edit", "The new content for the file")

    def __init__(self, file_system: FileSystemProvider):
        self.file_system = file_system

    async def execute(self, args: dict[str, Any]) -> ToolResult:
        try:
            path = require_str(args, "path")
            content = require_str(args, "content")
        except ToolArgumentError as e:
            return ToolError(str(e))

        if not self.file_system.can_write:
            return ToolError(WRITE_NOT_PERMITTED)

        try:
            self.file_system.write_file(path, content)
        except FileSystemError as e:
            return ToolError(f"Failed to edit file: {e}")

        logger.info(f"Updated file: {path}")
        return ToolSuccess(f"Successfully updated file: {path}")
