from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_runtimes() -> Dict[str, str]:
    return {
        "gxx": "g++",
        "javac": "javac",
        "java": "java",
        "python": "python3",
        "node": "node",
    }


class Settings(BaseSettings):
    # ---- workspace ----
    exec_dir: Path = Path("/tmp/executions")

    # ---- limits (milliseconds / bytes) ----
    compile_timeout_ms: int = 10000
    run_timeout_ms: int = 3000
    max_buffer_bytes: int = 10 * 1024 * 1024
    max_body_bytes: int = 50 * 1024 * 1024

    # ---- server ----
    server_name: str = "railway-judge-optimized"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # ---- toolchains ----
    cpp_flags: str = "-std=c++17 -O2 -pipe -static -s"
    runtimes: Dict[str, str] = Field(default_factory=_default_runtimes)

    # env prefix JUDGE_*
    model_config = SettingsConfigDict(env_prefix="JUDGE_", extra="ignore")

    def runtime(self, name: str) -> str:
        return self.runtimes.get(name) or _default_runtimes()[name]


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError:
        # broken config file -> keep defaults
        return {}
    return data if isinstance(data, dict) else {}


def load_settings() -> Settings:
    # 0) base from env JUDGE_*
    s = Settings()

    # 1) conf/judge.yaml (or JUDGE_CONF)
    data = _read_yaml(Path(os.environ.get("JUDGE_CONF", "conf/judge.yaml")))

    limits = data.get("limits") or {}
    if not isinstance(limits, dict):
        limits = {}
    runtimes = data.get("runtimes") or {}
    if not isinstance(runtimes, dict):
        runtimes = {}

    # 2) merge yaml values (typed like the fields)
    from_yaml: Dict[str, Any] = {}
    if "exec_dir" in data:
        from_yaml["exec_dir"] = Path(str(data["exec_dir"]))
    for key in ("compile_timeout_ms", "run_timeout_ms", "max_buffer_bytes", "max_body_bytes"):
        if key in limits:
            from_yaml[key] = int(limits[key])
    for key in ("server_name", "host", "cpp_flags", "log_level"):
        if key in data:
            from_yaml[key] = str(data[key])
    if "port" in data:
        from_yaml["port"] = int(data["port"])
    if runtimes:
        from_yaml["runtimes"] = {**s.runtimes, **{str(k): str(v) for k, v in runtimes.items()}}

    # JUDGE_* env wins over yaml
    update = {k: v for k, v in from_yaml.items() if k not in s.model_fields_set}

    # 3) plain PORT is what hosting platforms set
    port = os.environ.get("PORT")
    if port and "port" not in s.model_fields_set:
        update["port"] = int(port)

    return s.model_copy(update=update)


@lru_cache
def get_settings() -> Settings:
    return load_settings()
