from __future__ import annotations
import shlex
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from ..core.models import SourceFile


class LanguageHandler:
    """
    Strategy for one language: where sources go, how to compile (optional), how to run.

    Commands are fixed templates; the only value substituted is the entry file
    name, which is validated upstream and shell-quoted here.
    """

    tag: str = ""
    aliases: Tuple[str, ...] = ()
    extension: str = ""
    default_file: str = ""

    @property
    def has_compile_step(self) -> bool:
        return self.compile_command(self.default_file) is not None

    def file_name(self, source: SourceFile) -> str:
        return source.name or self.default_file

    def resolve_entry(self, files: Iterable[SourceFile]) -> str:
        # last file with our extension wins (nameless files count under the default
        # name); otherwise the default, written or not
        entry = None
        for f in files:
            name = self.file_name(f)
            if name.endswith(self.extension):
                entry = name
        return entry or self.default_file

    def write_files(self, workspace: Path, files: Sequence[SourceFile]) -> str:
        for f in files:
            (workspace / self.file_name(f)).write_text(f.content or "", encoding="utf-8")
        return self.resolve_entry(files)

    def compile_command(self, entry: str) -> Optional[str]:
        return None

    def run_command(self, entry: str) -> str:
        raise NotImplementedError

    @staticmethod
    def quote(value: str) -> str:
        return shlex.quote(value)
