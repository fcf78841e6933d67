from __future__ import annotations
from typing import Optional

from .base import LanguageHandler


class CppRunner(LanguageHandler):
    """Compiled-native: every ``*.cpp`` in the workspace into one static binary."""

    tag = "cpp"
    aliases = ("c++",)
    extension = ".cpp"
    default_file = "main.cpp"
    binary = "main"

    def __init__(self, gxx_bin: str = "g++", flags: str = "-std=c++17 -O2 -pipe -static -s"):
        self.gxx_bin = gxx_bin
        self.flags = flags

    def compile_command(self, entry: str) -> Optional[str]:
        return f"{self.quote(self.gxx_bin)} {self.flags} *{self.extension} -o {self.binary}"

    def run_command(self, entry: str) -> str:
        return f"./{self.binary}"
