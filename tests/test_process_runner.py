import shutil
import time

import pytest

from judge.core.errors import ProcessSpawnError
from judge.core.models import OUTPUT_LIMIT_EXIT_CODE, OUTPUT_LIMIT_MESSAGE, TIME_LIMIT_MESSAGE
from judge.runner.process import ProcessRunner


def test_stdin_is_passed_and_stdout_captured(tmp_path):
    res = ProcessRunner().run("cat", tmp_path, 2000, "hello\nworld\n")
    assert res.code == 0
    assert res.stdout == "hello\nworld\n"
    assert res.stderr == ""
    assert res.time_ms >= 0


def test_empty_input_closes_stdin(tmp_path):
    # cat would block forever if stdin stayed open
    res = ProcessRunner().run("cat", tmp_path, 2000, "")
    assert res.code == 0
    assert res.stdout == ""


def test_exit_code_and_stderr(tmp_path):
    res = ProcessRunner().run("echo oops >&2; exit 3", tmp_path, 2000)
    assert res.code == 3
    assert res.stderr == "oops\n"


def test_runs_in_working_directory(tmp_path):
    (tmp_path / "data.txt").write_text("42", encoding="utf-8")
    res = ProcessRunner().run("cat data.txt", tmp_path, 2000)
    assert res.stdout == "42"


def test_timeout_returns_sentinel(tmp_path):
    start = time.monotonic()
    res = ProcessRunner().run("sleep 10", tmp_path, 300)
    assert time.monotonic() - start < 5
    assert res.code == 124
    assert res.stderr == TIME_LIMIT_MESSAGE
    assert res.stdout == ""
    assert res.time_ms >= 300
    assert res.timed_out


def test_timeout_kills_whole_process_group(tmp_path):
    # background child keeps the pipes open; the run must still end at the deadline
    start = time.monotonic()
    res = ProcessRunner().run("sleep 10 & sleep 10", tmp_path, 300)
    assert res.code == 124
    assert time.monotonic() - start < 5


def test_signal_death_reports_zero(tmp_path):
    res = ProcessRunner().run("kill -9 $$", tmp_path, 2000)
    assert res.code == 0


def test_output_over_limit_is_reported(tmp_path):
    res = ProcessRunner(max_buffer=1000).run("head -c 100000 /dev/zero | tr '\\0' a", tmp_path, 5000)
    assert len(res.stdout) == 1000
    assert res.code == OUTPUT_LIMIT_EXIT_CODE
    assert res.stderr.endswith(OUTPUT_LIMIT_MESSAGE)


def test_child_ignoring_input_is_not_an_error(tmp_path):
    res = ProcessRunner().run("echo done", tmp_path, 2000, "x" * (1024 * 1024))
    assert res.code == 0
    assert res.stdout == "done\n"


def test_missing_cwd_is_a_spawn_error(tmp_path):
    with pytest.raises(ProcessSpawnError):
        ProcessRunner().run("true", tmp_path / "nope", 1000)


def test_stderr_flood_with_clean_exit_is_still_a_failure(tmp_path):
    res = ProcessRunner(max_buffer=1000).run("head -c 100000 /dev/zero | tr '\\0' e >&2; exit 0", tmp_path, 5000)
    assert res.code != 0
    assert res.stderr.endswith(OUTPUT_LIMIT_MESSAGE)


@pytest.mark.skipif(shutil.which("setsid") is None, reason="setsid not installed")
def test_detached_grandchild_does_not_hang_the_run(tmp_path):
    # sleep escapes the process group but inherits stdout
    start = time.monotonic()
    res = ProcessRunner().run("setsid sleep 20 & echo hi", tmp_path, 5000)
    assert time.monotonic() - start < 10
    assert res.code == 0
    assert res.stdout == "hi\n"
