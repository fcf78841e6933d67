from pathlib import Path

from judge.settings import Settings, load_settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("JUDGE_CONF", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("PORT", raising=False)
    s = load_settings()
    assert s.exec_dir == Path("/tmp/executions")
    assert s.compile_timeout_ms == 10000
    assert s.run_timeout_ms == 3000
    assert s.max_buffer_bytes == 10 * 1024 * 1024
    assert s.port == 8000
    assert s.runtime("python") == "python3"


def test_yaml_overrides_defaults(monkeypatch, tmp_path):
    conf = tmp_path / "judge.yaml"
    conf.write_text(
        "exec_dir: /srv/judge\n"
        "limits:\n  run_timeout_ms: 1500\n"
        "runtimes:\n  python: /usr/bin/python3.12\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("JUDGE_CONF", str(conf))
    s = load_settings()
    assert s.exec_dir == Path("/srv/judge")
    assert s.run_timeout_ms == 1500
    assert s.compile_timeout_ms == 10000
    assert s.runtime("python") == "/usr/bin/python3.12"
    assert s.runtime("node") == "node"


def test_env_wins_over_yaml(monkeypatch, tmp_path):
    conf = tmp_path / "judge.yaml"
    conf.write_text("limits:\n  run_timeout_ms: 1500\n", encoding="utf-8")
    monkeypatch.setenv("JUDGE_CONF", str(conf))
    monkeypatch.setenv("JUDGE_RUN_TIMEOUT_MS", "700")
    assert load_settings().run_timeout_ms == 700


def test_broken_yaml_keeps_defaults(monkeypatch, tmp_path):
    conf = tmp_path / "judge.yaml"
    conf.write_text("limits: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("JUDGE_CONF", str(conf))
    assert load_settings().run_timeout_ms == Settings().run_timeout_ms


def test_platform_port(monkeypatch, tmp_path):
    monkeypatch.setenv("JUDGE_CONF", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("PORT", "9090")
    assert load_settings().port == 9090
