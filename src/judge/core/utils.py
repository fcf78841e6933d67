from __future__ import annotations
import re
import uuid
from typing import Iterable, List, Optional, Sequence

from .errors import InvalidFileNameError

_SAFE_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\-]*$")


def new_job_id() -> str:
    return uuid.uuid4().hex


def validate_file_name(name: Optional[str]) -> None:
    # nameless files take the language default later
    if not name:
        return
    if not _SAFE_NAME.match(name) or ".." in name:
        raise InvalidFileNameError(name)


def validate_file_names(names: Iterable[Optional[str]]) -> None:
    for name in names:
        validate_file_name(name)


def normalize_inputs(inputs: Optional[Sequence[str]], stdin: Optional[str]) -> List[str]:
    """A non-empty ``inputs`` list is the batch, otherwise the single ``stdin``."""
    if inputs:
        return list(inputs)
    return [stdin or ""]
