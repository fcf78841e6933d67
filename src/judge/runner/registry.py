from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from ..core.errors import UnsupportedLanguageError
from ..settings import Settings
from .base import LanguageHandler
from .cpp_runner import CppRunner
from .java_runner import JavaRunner
from .node_runner import NodeRunner
from .python_runner import PythonRunner


class LanguageRegistry:
    """Handlers keyed by canonical tag, plus their aliases."""

    def __init__(self, handlers: Iterable[LanguageHandler]):
        self._handlers: Dict[str, LanguageHandler] = {}
        self._aliases: Dict[str, str] = {}
        for h in handlers:
            self._handlers[h.tag] = h
            for alias in h.aliases:
                self._aliases[alias] = h.tag

    @classmethod
    def from_settings(cls, s: Settings) -> "LanguageRegistry":
        return cls([
            CppRunner(gxx_bin=s.runtime("gxx"), flags=s.cpp_flags),
            PythonRunner(python_bin=s.runtime("python")),
            JavaRunner(javac_bin=s.runtime("javac"), java_bin=s.runtime("java")),
            NodeRunner(node_bin=s.runtime("node")),
        ])

    def canonical(self, language: Optional[str]) -> str:
        tag = (language or "").strip().lower()
        tag = self._aliases.get(tag, tag)
        if tag not in self._handlers:
            raise UnsupportedLanguageError((language or "").strip().lower())
        return tag

    def get(self, language: Optional[str]) -> LanguageHandler:
        return self._handlers[self.canonical(language)]

    def languages(self) -> List[str]:
        return list(self._handlers)
