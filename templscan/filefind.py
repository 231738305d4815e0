"""File requests that match templates against files on local disk."""

from __future__ import annotations

import glob
import logging
import os
import stat
from dataclasses import dataclass, field
from typing import Any, Iterator

log = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 5 * 1024 * 1024

DEFAULT_DENYLIST: tuple[str, ...] = (
    ".3g2", ".3gp", ".7z", ".apk", ".arj", ".avi", ".axd", ".bmp", ".css",
    ".csv", ".deb", ".dll", ".doc", ".drv", ".eot", ".exe", ".flv", ".gif",
    ".gifv", ".gz", ".h264", ".ico", ".iso", ".jar", ".jpeg", ".jpg", ".lock",
    ".m4a", ".m4v", ".map", ".mkv", ".mov", ".mp3", ".mp4", ".mpeg", ".mpg",
    ".msi", ".ogg", ".ogm", ".ogv", ".otf", ".pdf", ".pkg", ".png", ".ppt",
    ".psd", ".rar", ".rm", ".rpm", ".svg", ".swf", ".sys", ".tar.gz", ".tar",
    ".tif", ".tiff", ".ttf", ".txt", ".vob", ".wav", ".webm", ".wmv", ".woff",
    ".woff2", ".xcf", ".xls", ".xlsx", ".zip",
)


def _dotted(extension: str) -> str:
    return extension if extension.startswith(".") else "." + extension


def _extension(item: str) -> str:
    """Extension of the last slash-separated element, dot included."""
    base = item.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot != -1 else ""


def _walk_files(root: str) -> Iterator[str]:
    """Yield every non-directory entry below root, skipping unreadable nodes."""
    try:
        entries = list(os.scandir(root))
    except OSError:
        return
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue
        if is_dir:
            yield from _walk_files(entry.path)
        else:
            yield entry.path


@dataclass
class FileRequest:
    """Matching of templates against files, globs or directory trees."""

    id: str = ""
    extensions: list[str] = field(default_factory=list)
    extension_denylist: list[str] = field(default_factory=list)
    max_size: int = 0
    no_recursive: bool = False
    template_id: str = ""
    template_info: dict[str, Any] = field(default_factory=dict)
    allowed_extensions: set[str] = field(default_factory=set, init=False)
    denied_extensions: set[str] = field(default_factory=set, init=False)
    all_extensions: bool = field(default=False, init=False)

    def compile(self) -> None:
        """Prepare the extension lists and the default size limit."""
        if self.max_size == 0:
            self.max_size = DEFAULT_MAX_SIZE
        self.allowed_extensions = set()
        self.all_extensions = False
        for extension in self.extensions:
            if extension == "all":
                self.all_extensions = True
            else:
                self.allowed_extensions.add(_dotted(extension))
        self.denied_extensions = {_dotted(ext) for ext in DEFAULT_DENYLIST}
        self.denied_extensions.update(_dotted(ext) for ext in self.extension_denylist)

    def requests(self) -> int:
        """Number of requests this template performs."""
        return 1

    def validate_path(self, item: str) -> bool:
        """Check a path against the allowed and denied extensions."""
        extension = _extension(item)
        if self.allowed_extensions:
            if extension in self.allowed_extensions:
                return True
            if not self.all_extensions:
                return False
        if extension in self.denied_extensions:
            log.debug("Ignoring path %s due to denylist item %s", item, extension)
            return False
        return True

    def input_paths(self, target: str) -> Iterator[str]:
        """Yield each file to process for a glob, file or directory target."""
        processed: set[str] = set()

        if "*" in target and not self.no_recursive:
            for match in sorted(glob.glob(target)):
                if self.validate_path(match) and match not in processed:
                    processed.add(match)
                    yield match
            return

        mode = os.stat(target).st_mode
        if stat.S_ISREG(mode):
            if self.validate_path(target):
                processed.add(target)
                yield target
            return
        if self.no_recursive:
            return
        for path in _walk_files(target):
            if self.validate_path(path) and path not in processed:
                processed.add(path)
                yield path

    def response_to_dsl_map(self, raw: str, host: str, matched: str) -> dict[str, Any]:
        """Build the map of a file's contents used for matching."""
        return {
            "path": host,
            "matched": matched,
            "raw": raw,
            "template-id": self.template_id,
            "template-info": self.template_info,
        }