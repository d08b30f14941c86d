from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from binsnap.config.snapshot_config import (
    DEFAULT_INPUT_FILE_SIZE,
    DEVICE_PREFIX,
    PLACEHOLDER_MARKER,
    STAGING_DIR,
    TRUNCATED_INPUT_PATH,
)


class StagingInvariantError(RuntimeError):
    """An argument resolved to an existing path that has no base name (e.g. "/")."""


@dataclass(frozen=True)
class StagedFile:
    source: Path
    name: str
    staging_dir: str = STAGING_DIR

    @staticmethod
    def from_path(source: Path, staging_dir: str = STAGING_DIR) -> "StagedFile":
        name = source.name
        if not name or name in (".", ".."):
            raise StagingInvariantError(f"existing path has no base name: {str(source)!r}")
        return StagedFile(source=source, name=name, staging_dir=staging_dir)

    @property
    def staged_path(self) -> str:
        return f"{self.staging_dir.rstrip('/')}/{self.name}"

    def copy_instruction(self) -> str:
        # JSON string quoting, e.g. COPY "/tmp/cfg.json" /opt
        return f"COPY {json.dumps(str(self.source))} {self.staging_dir}"


@dataclass(frozen=True)
class Literal:
    text: str

    def rendered(self) -> str:
        return self.text


@dataclass(frozen=True)
class PlaceholderInputFile:
    path: str = TRUNCATED_INPUT_PATH

    def rendered(self) -> str:
        return self.path


@dataclass(frozen=True)
class StagedFileReference:
    staged: StagedFile

    def rendered(self) -> str:
        return self.staged.staged_path


ArgumentToken = Union[Literal, PlaceholderInputFile, StagedFileReference]


@dataclass(frozen=True)
class TruncationSpec:
    size: int
    path: str = TRUNCATED_INPUT_PATH

    def directive(self) -> str:
        return f"RUN truncate -s {self.size} {self.path}"


@dataclass(frozen=True)
class ClassifiedArguments:
    tokens: tuple[ArgumentToken, ...]
    truncation: TruncationSpec | None

    @property
    def staged_files(self) -> list[StagedFile]:
        return [t.staged for t in self.tokens if isinstance(t, StagedFileReference)]

    def copy_instructions(self) -> list[str]:
        return [sf.copy_instruction() for sf in self.staged_files]

    def argv(self) -> list[str]:
        return [t.rendered() for t in self.tokens]


def _resolve_existing(token: str, base_dir: Path | None = None) -> Path | None:
    # Joining keeps ".." components, so ".." resolves to a path with no base name.
    try:
        candidate = (base_dir if base_dir is not None else Path.cwd()) / token
        if candidate.exists():
            return candidate
    except (OSError, ValueError):
        return None
    return None


def classify_token(
    token: str,
    *,
    staging_dir: str = STAGING_DIR,
    base_dir: Path | None = None,
) -> ArgumentToken:
    # Existing files win over the marker: a real file named "@@" is staged.
    resolved = _resolve_existing(token, base_dir)
    if resolved is not None and not token.startswith(DEVICE_PREFIX):
        return StagedFileReference(StagedFile.from_path(resolved, staging_dir=staging_dir))
    if token == PLACEHOLDER_MARKER:
        return PlaceholderInputFile()
    return Literal(token)


def classify_arguments(
    raw: str | None,
    input_file_size: int | None = None,
    *,
    staging_dir: str = STAGING_DIR,
    base_dir: Path | None = None,
) -> ClassifiedArguments:
    """
    Split a raw argument string on whitespace and classify each token, in order.

    Tokens naming an existing file (outside /dev) become staged copies, the
    "@@" marker becomes the truncated input file, and everything else is
    passed through. A TruncationSpec is produced only when the marker occurs.
    """
    tokens: list[ArgumentToken] = []
    for token in (raw or "").split():
        tokens.append(classify_token(token, staging_dir=staging_dir, base_dir=base_dir))

    truncation = None
    if any(isinstance(t, PlaceholderInputFile) for t in tokens):
        size = input_file_size if input_file_size is not None else DEFAULT_INPUT_FILE_SIZE
        truncation = TruncationSpec(size=size)
    return ClassifiedArguments(tokens=tuple(tokens), truncation=truncation)
