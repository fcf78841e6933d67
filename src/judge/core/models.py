from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

TIME_LIMIT_EXIT_CODE = 124
TIME_LIMIT_MESSAGE = "Time limit exceeded"
OUTPUT_LIMIT_EXIT_CODE = 1
OUTPUT_LIMIT_MESSAGE = "Output limit exceeded"


@dataclass
class SourceFile:
    content: str = ""
    name: Optional[str] = None   # None/"" -> default file of the language


@dataclass
class Job:
    job_id: str
    language: str                # canonical tag: "cpp" | "java" | "python" | "javascript"
    files: List[SourceFile]
    inputs: List[str]            # never empty, one run per entry
    compile_timeout_ms: int
    run_timeout_ms: int


@dataclass
class ProcessResult:
    """Outcome of one compile or run invocation."""
    code: int = 0
    stdout: str = ""
    stderr: str = ""
    time_ms: int = 0

    @classmethod
    def time_limit(cls, time_ms: int) -> "ProcessResult":
        return cls(code=TIME_LIMIT_EXIT_CODE, stdout="", stderr=TIME_LIMIT_MESSAGE, time_ms=time_ms)

    @property
    def timed_out(self) -> bool:
        return self.code == TIME_LIMIT_EXIT_CODE and self.stderr == TIME_LIMIT_MESSAGE

    def to_dict(self) -> Dict[str, Union[int, str]]:
        return {"stdout": self.stdout, "stderr": self.stderr, "code": self.code, "timeMs": self.time_ms}


# Same shape, different phase
CompileResult = ProcessResult
RunResult = ProcessResult


@dataclass
class JobResult:
    compile: Optional[ProcessResult] = None      # None: language has no compile phase
    results: List[ProcessResult] = field(default_factory=list)

    @property
    def compiled_ok(self) -> bool:
        return self.compile is None or self.compile.code == 0
