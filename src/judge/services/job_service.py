from __future__ import annotations
from typing import List, Optional, Sequence

import structlog

from ..core.models import Job, JobResult, SourceFile
from ..core.utils import new_job_id, normalize_inputs, validate_file_names
from ..runner.process import ProcessRunner
from ..runner.registry import LanguageRegistry
from ..settings import Settings, get_settings
from .batch_executor import BatchExecutor
from .workspace import WorkspaceManager

log = structlog.get_logger(__name__)


class JobService:
    """
    Request boundary: validate, then workspace -> batch execution -> cleanup.
    Nothing touches the filesystem before the language and file names are accepted.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.registry = LanguageRegistry.from_settings(self.settings)
        self.workspaces = WorkspaceManager(self.settings.exec_dir)
        self.executor = BatchExecutor(ProcessRunner(max_buffer=self.settings.max_buffer_bytes))

    def languages(self) -> List[str]:
        return self.registry.languages()

    def create_job(
        self,
        language: Optional[str],
        files: Sequence[SourceFile],
        stdin: Optional[str] = "",
        inputs: Optional[Sequence[str]] = None,
        compile_timeout_ms: Optional[int] = None,
        run_timeout_ms: Optional[int] = None,
    ) -> Job:
        """Build a validated Job; raises UnsupportedLanguageError / InvalidFileNameError."""
        tag = self.registry.canonical(language)
        validate_file_names(f.name for f in files)
        return Job(
            job_id=new_job_id(),
            language=tag,
            files=list(files),
            inputs=normalize_inputs(inputs, stdin),
            # 0 / missing -> server default
            compile_timeout_ms=compile_timeout_ms or self.settings.compile_timeout_ms,
            run_timeout_ms=run_timeout_ms or self.settings.run_timeout_ms,
        )

    def run_job(self, job: Job) -> JobResult:
        handler = self.registry.get(job.language)
        log.info("job_start", job_id=job.job_id, lang=job.language, batch_size=len(job.inputs))
        try:
            with self.workspaces.workspace(job.job_id) as ws:
                result = self.executor.execute(
                    handler,
                    ws,
                    job.files,
                    job.inputs,
                    job.compile_timeout_ms,
                    job.run_timeout_ms,
                )
        except Exception as e:
            log.exception("job_error", job_id=job.job_id, error=str(e))
            raise
        log.info(
            "job_done",
            job_id=job.job_id,
            compiled=result.compiled_ok,
            runs=len(result.results),
        )
        return result
