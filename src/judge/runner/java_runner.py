from __future__ import annotations
from pathlib import PurePath
from typing import Optional

from .base import LanguageHandler


class JavaRunner(LanguageHandler):
    """Compiled-bytecode: ``javac *.java``, then the entry file's class on the JVM."""

    tag = "java"
    extension = ".java"
    default_file = "Main.java"

    def __init__(self, javac_bin: str = "javac", java_bin: str = "java"):
        self.javac_bin = javac_bin
        self.java_bin = java_bin

    def compile_command(self, entry: str) -> Optional[str]:
        return f"{self.quote(self.javac_bin)} *{self.extension}"

    def run_command(self, entry: str) -> str:
        main_class = PurePath(entry).stem
        return f"{self.quote(self.java_bin)} -cp . {self.quote(main_class)}"
