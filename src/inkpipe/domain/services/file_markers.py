"""Plain-text markers that carry file identity through message content.

The markers must be preserved exactly, otherwise cache keys recovered from
existing messages stop matching:

    --- 文件: report.md <!PATH:/abs/report.md!> ---
    ...file body...
    --- 文件结束 ---
"""

import re
from dataclasses import dataclass
from pathlib import PurePath

from inkpipe.domain.entities.inputs import AttachedFile

FILE_SEPARATOR = "\n\n---\n\n"
FILE_FOOTER = "--- 文件结束 ---"

_PATH_MARK = re.compile(r"<!PATH:(.+?)!>")
_HEADER_NAME = re.compile(r"---\s*文件:\s*(.+?)\s*(?:<!PATH:.*?!>)?\s*---")
_HEADER = re.compile(r"---\s*文件:.*?---\s*")
_FOOTER = re.compile(r"---\s*文件结束\s*---")


@dataclass(frozen=True)
class ParsedFile:
    """File identity recovered from message content.

    Attributes:
        full_path: Absolute path from the first path marker.
        file_name: Display name from the first header line.
        actual_content: Body with header, footer and path markers removed.
        paths: Every path marker found, in order. Merged file messages
            carry one per attached file.
    """

    full_path: str | None
    file_name: str | None
    actual_content: str
    paths: tuple[str, ...] = ()

    @property
    def is_merged(self) -> bool:
        return len(self.paths) > 1


def parse_file_content(content: str) -> ParsedFile:
    """Recover path, name and body from marked-up file content."""
    paths = tuple(_PATH_MARK.findall(content))
    full_path = paths[0] if paths else None

    name_match = _HEADER_NAME.search(content)
    file_name = name_match.group(1).strip() if name_match else None

    actual_content = content
    if file_name:
        actual_content = _FOOTER.sub("", _HEADER.sub("", content)).strip()

    return ParsedFile(
        full_path=full_path,
        file_name=file_name,
        actual_content=actual_content,
        paths=paths,
    )


def wrap_file_content(file_name: str, body: str) -> str:
    """Wrap a body with a clean header (no path marker) and footer."""
    return f"\n\n--- 文件: {file_name} ---\n{body}\n{FILE_FOOTER}"


def format_attached_file(attached: AttachedFile) -> str:
    """Render a structured attachment into the marker form."""
    name = attached.name
    if not name and attached.path:
        name = PurePath(attached.path).name
    if not name:
        return attached.content

    header = f"--- 文件: {name}"
    if attached.path:
        header += f" <!PATH:{attached.path}!>"
    header += " ---"
    return f"{header}\n{attached.content}\n{FILE_FOOTER}"


def join_files(contents: list[str]) -> str:
    return FILE_SEPARATOR.join(contents)
