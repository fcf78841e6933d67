from __future__ import annotations
import math
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from ..core.errors import InvalidFileNameError, UnsupportedLanguageError
from ..core.models import ProcessResult, SourceFile
from ..services.job_service import JobService
from .limits import BodyLimitMiddleware
from ..settings import Settings, get_settings

log = structlog.get_logger(__name__)


# --------- Schemas (Piston-compatible + batch) ---------
class FileIn(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = ""


class ExecuteReq(BaseModel):
    language: Optional[str] = None
    files: List[FileIn] = Field(default_factory=list)
    stdin: Optional[str] = ""
    inputs: Optional[List[str]] = None
    compile_timeout: Optional[int] = None
    run_timeout: Optional[int] = None

    @field_validator("compile_timeout", "run_timeout", mode="before")
    @classmethod
    def _lenient_ms(cls, v: Any) -> Optional[int]:
        # anything that is not a positive number falls back to the server default
        if v is None or isinstance(v, bool):
            return None
        try:
            ms = float(v)
        except (TypeError, ValueError):
            return None
        if math.isnan(ms) or math.isinf(ms) or ms <= 0:
            return None
        return int(ms)


def _run_payload(results: List[ProcessResult]) -> Dict[str, Any]:
    # legacy single-run field: first batch element
    return (results[0] if results else ProcessResult()).to_dict()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    s = settings or get_settings()
    svc = JobService(s)

    app = FastAPI(title="Judge API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BodyLimitMiddleware, max_bytes=s.max_body_bytes)
    app.state.job_service = svc

    # --------- Endpoints ---------

    @app.get("/")
    def health():
        return {
            "status": "ok",
            "server": s.server_name,
            "batch_support": True,
            "languages": svc.languages(),
        }

    @app.post("/api/v2/piston/execute")
    def execute(req: ExecuteReq):
        files = [SourceFile(name=f.name, content=f.content or "") for f in req.files]
        try:
            job = svc.create_job(
                language=req.language,
                files=files,
                stdin=req.stdin,
                inputs=req.inputs,
                compile_timeout_ms=req.compile_timeout,
                run_timeout_ms=req.run_timeout,
            )
        except (UnsupportedLanguageError, InvalidFileNameError) as e:
            log.info("job_rejected", language=req.language, reason=str(e))
            return JSONResponse(status_code=400, content={"error": str(e)})

        try:
            result = svc.run_job(job)
        except Exception as e:
            return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})

        body: Dict[str, Any] = {"language": job.language}
        if result.compile is not None:
            body["compile"] = result.compile.to_dict()
        body["run"] = _run_payload(result.results)
        body["results"] = [r.to_dict() for r in result.results]
        return body

    return app


app = create_app()
