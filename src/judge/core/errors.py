from __future__ import annotations


class JudgeError(Exception):
    pass


class UnsupportedLanguageError(JudgeError, ValueError):
    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Unsupported language: {language}")


class InvalidFileNameError(JudgeError, ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid file name: {name!r}")


class WorkspaceError(JudgeError):
    """Scratch directory for a job could not be created."""


class ProcessSpawnError(JudgeError):
    """The OS refused to start the command (missing cwd, fork failure...)."""
