from __future__ import annotations
from pathlib import Path
from typing import List, Sequence

import structlog

from ..core.models import JobResult, ProcessResult, SourceFile
from ..runner.base import LanguageHandler
from ..runner.process import ProcessRunner

log = structlog.get_logger(__name__)


class BatchExecutor:
    """Compile once, run once per input against the same artifact."""

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    def execute(
        self,
        handler: LanguageHandler,
        workspace: Path,
        files: Sequence[SourceFile],
        inputs: Sequence[str],
        compile_timeout_ms: int,
        run_timeout_ms: int,
    ) -> JobResult:
        # 1) sources, in submission order (same name: last one wins)
        entry = handler.write_files(workspace, files)

        # 2) compile, no stdin
        compile_res = None
        compile_cmd = handler.compile_command(entry)
        if compile_cmd is not None:
            compile_res = self.runner.run(compile_cmd, workspace, compile_timeout_ms)
            if compile_res.code != 0:
                log.info("compile_failed", lang=handler.tag, code=compile_res.code)
                return JobResult(compile=compile_res, results=[])

        # 3) one run per input, sequential; a timeout only marks its own slot
        run_cmd = handler.run_command(entry)
        results: List[ProcessResult] = []
        for text in inputs:
            results.append(self.runner.run(run_cmd, workspace, run_timeout_ms, text))

        return JobResult(compile=compile_res, results=results)
