"""Unit tests for the file system provider and file tools."""

import pytest

from agentloop.tools import ToolError, ToolSuccess
from agentloop.tools.filesystem import (
    READ_ONLY,
    READ_WRITE,
    CreateFileTool,
    EditFileTool,
    FileSystemError,
    FileSystemProvider,
    ListDirectoryTool,
    ReadFileTool,
)


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "README.md").write_text("# Demo\n")
    (tmp_path / "src" / "main.py").write_text("print('hi')\n")
    return tmp_path


def test_provider_list_directory_sorted(project):
    assert READ_ONLY.list_directory(str(project)) == ["README.md", "src"]


def test_provider_list_missing_directory(tmp_path):
    with pytest.raises(FileSystemError, match="Directory does not exist"):
        READ_ONLY.list_directory(str(tmp_path / "nope"))


def test_provider_list_file_is_not_directory(project):
    with pytest.raises(FileSystemError, match="Path is not a directory"):
        READ_ONLY.list_directory(str(project / "README.md"))


def test_provider_read_missing_file(tmp_path):
    with pytest.raises(FileSystemError, match="File does not exist"):
        READ_ONLY.read_file(str(tmp_path / "missing.txt"))


def test_read_only_provider_refuses_writes(tmp_path):
    with pytest.raises(FileSystemError, match="Write operation not permitted"):
        FileSystemProvider(can_write=False).write_file(str(tmp_path / "x.txt"), "x")
    assert not (tmp_path / "x.txt").exists()


@pytest.mark.asyncio
async def test_list_directory_tool(project):
    result = await ListDirectoryTool(READ_ONLY).execute({"path": str(project)})

    assert result == ToolSuccess(f"Contents of {project}:\n- README.md\n- src")


@pytest.mark.asyncio
async def test_list_directory_tool_missing_path_argument():
    result = await ListDirectoryTool(READ_ONLY).execute({})
    assert result == ToolError("Missing required parameter: path")


@pytest.mark.asyncio
async def test_list_directory_tool_failure(tmp_path):
    result = await ListDirectoryTool(READ_ONLY).execute({"path": str(tmp_path / "nope")})

    assert isinstance(result, ToolError)
    assert result.message.startswith("Failed to list directory: Directory does not exist")


@pytest.mark.asyncio
async def test_read_file_tool(project):
    path = str(project / "README.md")

    result = await ReadFileTool(READ_ONLY).execute({"path": path})

    assert result == ToolSuccess(f"File content of {path}:\n```\n# Demo\n\n```")


@pytest.mark.asyncio
async def test_read_file_tool_invalid_argument():
    result = await ReadFileTool(READ_ONLY).execute({"path": 42})
    assert result == ToolError("Invalid parameter 'path': expected string, got integer")


@pytest.mark.asyncio
async def test_create_file_tool_makes_parents(tmp_path):
    path = tmp_path / "pkg" / "util" / "fib.py"

    result = await CreateFileTool(READ_WRITE).execute({"path": str(path), "content": "def fib(): ..."})

    assert result == ToolSuccess(f"Successfully created file: {path}")
    assert path.read_text() == "def fib(): ..."


@pytest.mark.asyncio
async def test_create_file_tool_refuses_existing(project):
    path = str(project / "README.md")

    result = await CreateFileTool(READ_WRITE).execute({"path": path, "content": "x"})

    assert result == ToolError(f"File already exists: {path}. Use edit_file to modify existing files.")
    assert (project / "README.md").read_text() == "# Demo\n"


@pytest.mark.asyncio
async def test_create_file_tool_read_only_provider(tmp_path):
    result = await CreateFileTool(READ_ONLY).execute({"path": str(tmp_path / "a.txt"), "content": "x"})

    assert result == ToolError("Write operations are not permitted with this file system provider")
    assert not (tmp_path / "a.txt").exists()


@pytest.mark.asyncio
async def test_create_file_tool_missing_content(tmp_path):
    result = await CreateFileTool(READ_WRITE).execute({"path": str(tmp_path / "a.txt")})
    assert result == ToolError("Missing required parameter: content")


@pytest.mark.asyncio
async def test_edit_file_tool_replaces_content(project):
    path = project / "src" / "main.py"

    result = await EditFileTool(READ_WRITE).execute({"path": str(path), "content": "print('bye')\n"})

    assert result == ToolSuccess(f"Successfully updated file: {path}")
    assert path.read_text() == "print('bye')\n"


@pytest.mark.asyncio
async def test_edit_file_tool_read_only_provider(project):
    path = project / "src" / "main.py"

    result = await EditFileTool(READ_ONLY).execute({"path": str(path), "content": "x"})

    assert isinstance(result, ToolError)
    assert path.read_text() == "print('hi')\n"


@pytest.mark.asyncio
async def test_edit_file_tool_write_failure(tmp_path):
    path = tmp_path / "missing_dir" / "file.txt"

    result = await EditFileTool(READ_WRITE).execute({"path": str(path), "content": "x"})

    assert isinstance(result, ToolError)
    assert result.message.startswith("Failed to edit file")
