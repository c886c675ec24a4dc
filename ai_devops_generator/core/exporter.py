"""
Artifact export.

Materializes generated text as a named, downloadable plain-text file.
"""

import io
import re
from dataclasses import dataclass
from pathlib import Path

from .use_cases import USE_CASE_REGISTRY, UseCaseRegistry

MIME_TYPE = "text/plain"

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class ExportedFile:
    """An artifact ready to be offered for download."""
    filename: str
    content: str
    mime_type: str = MIME_TYPE

    def open(self) -> io.BytesIO:
        """Return a new binary handle over the content.

        Each call yields an independent handle.
        """
        return io.BytesIO(self.content.encode("utf-8"))

    def save(self, directory) -> Path:
        """Write the file into a directory and return its path."""
        target = Path(directory) / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.content, encoding="utf-8")
        return target


def build_filename(use_case_key: str, registry: UseCaseRegistry = USE_CASE_REGISTRY) -> str:
    """Download filename for a use case.

    "GitHub Actions Workflow" -> "github_actions_workflow.yml"
    """
    stem = _WHITESPACE_RUN.sub("_", use_case_key.lower())
    return f"{stem}{registry.file_extension(use_case_key)}"


def export(content: str, filename: str) -> ExportedFile:
    return ExportedFile(filename=filename, content=content)


def export_for_use_case(content: str, use_case_key: str) -> ExportedFile:
    return export(content, build_filename(use_case_key))
