from __future__ import annotations
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import structlog

from ..core.errors import WorkspaceError
from ..core.utils import new_job_id

log = structlog.get_logger(__name__)


class WorkspaceManager:
    """
    Scratch directories on the local filesystem:
      <root>/<job_id>/
        ├─ <source files>   (written by the language handler)
        └─ <build outputs>  (main, *.class ...)

    One directory per job, never reused, removed when the job ends.
    """

    def __init__(self, root: Path):
        # keep an absolute root so handlers never depend on the server cwd
        self.root = root if root.is_absolute() else root.resolve()

    def allocate(self, job_id: Optional[str] = None) -> Path:
        p = self.root / (job_id or new_job_id())
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # exist_ok=False: a name clash must fail, not share a directory
            p.mkdir()
        except OSError as e:
            raise WorkspaceError(f"cannot create workspace {p}: {e}") from e
        return p

    def release(self, workspace: Path) -> None:
        """Delete the workspace. Idempotent, never raises."""
        try:
            shutil.rmtree(workspace)
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning("workspace_release_failed", workspace=str(workspace), error=str(e))

    @contextmanager
    def workspace(self, job_id: Optional[str] = None) -> Iterator[Path]:
        p = self.allocate(job_id)
        try:
            yield p
        finally:
            self.release(p)
