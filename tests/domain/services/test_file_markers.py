"""Tests for file content markers."""

from inkpipe.domain.entities import AttachedFile
from inkpipe.domain.services.file_markers import (
    format_attached_file,
    join_files,
    parse_file_content,
    wrap_file_content,
)


class TestParseFileContent:
    """parse_file_content tests."""

    def test_with_path_marker(self) -> None:
        """Path, name and body are recovered."""
        content = (
            "--- 文件: report.md <!PATH:/abs/report.md!> ---\n"
            "body line\n"
            "--- 文件结束 ---"
        )

        parsed = parse_file_content(content)

        assert parsed.full_path == "/abs/report.md"
        assert parsed.file_name == "report.md"
        assert parsed.actual_content == "body line"
        assert parsed.is_merged is False

    def test_without_path_marker(self) -> None:
        parsed = parse_file_content("--- 文件: notes.txt ---\nhello\n--- 文件结束 ---")

        assert parsed.full_path is None
        assert parsed.file_name == "notes.txt"
        assert parsed.actual_content == "hello"

    def test_plain_text(self) -> None:
        """Unmarked content is returned untouched."""
        parsed = parse_file_content("just text")

        assert parsed.full_path is None
        assert parsed.file_name is None
        assert parsed.actual_content == "just text"
        assert parsed.paths == ()
        assert parsed.is_merged is False

    def test_merged_content_lists_every_path(self) -> None:
        content = join_files(
            [
                format_attached_file(AttachedFile(content="one", path="/docs/a.md")),
                format_attached_file(AttachedFile(content="two", path="/docs/b.md")),
            ]
        )

        parsed = parse_file_content(content)

        assert parsed.paths == ("/docs/a.md", "/docs/b.md")
        assert parsed.is_merged is True
        assert parsed.full_path == "/docs/a.md"


class TestFormatting:
    """Marker formatting tests."""

    def test_format_attached_file_round_trips(self) -> None:
        attached = AttachedFile(content="data", path="/tmp/a/data.csv")

        parsed = parse_file_content(format_attached_file(attached))

        assert parsed.full_path == "/tmp/a/data.csv"
        assert parsed.file_name == "data.csv"
        assert parsed.actual_content == "data"

    def test_format_attached_file_without_identity(self) -> None:
        assert format_attached_file(AttachedFile(content="raw")) == "raw"

    def test_wrap_has_no_path_marker(self) -> None:
        wrapped = wrap_file_content("report.md", "digest")

        assert wrapped == "\n\n--- 文件: report.md ---\ndigest\n--- 文件结束 ---"
        assert "<!PATH:" not in wrapped

    def test_join_files(self) -> None:
        assert join_files(["a", "b"]) == "a\n\n---\n\nb"
