import shutil
import sys

import pytest
from fastapi.testclient import TestClient

from judge.api.app import create_app
from judge.settings import Settings

needs_gxx = pytest.mark.skipif(shutil.which("g++") is None, reason="g++ not installed")
needs_java = pytest.mark.skipif(
    shutil.which("javac") is None or shutil.which("java") is None, reason="JDK not installed"
)
needs_node = pytest.mark.skipif(shutil.which("node") is None, reason="node not installed")


@pytest.fixture
def exec_dir(tmp_path):
    return tmp_path / "executions"


@pytest.fixture
def settings(exec_dir):
    # the interpreter running the tests stands in for python3; no -static (libc.a is often missing)
    return Settings(
        exec_dir=exec_dir,
        cpp_flags="-std=c++17 -O2 -pipe",
        runtimes={"gxx": "g++", "javac": "javac", "java": "java", "python": sys.executable, "node": "node"},
    )


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


def leftover_workspaces(exec_dir):
    return list(exec_dir.iterdir()) if exec_dir.exists() else []
