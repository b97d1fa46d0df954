from __future__ import annotations

from promptlab.service import dev_server


def test_main_runs_uvicorn_with_environment_settings(monkeypatch):
    calls = []
    monkeypatch.setattr(dev_server.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))
    monkeypatch.setenv("PROMPTLAB_HOST", "0.0.0.0")
    monkeypatch.setenv("PROMPTLAB_PORT", "8123")
    monkeypatch.setenv("PROMPTLAB_RELOAD", "true")

    dev_server.main()

    assert calls == [("promptlab.service.app:app", {"host": "0.0.0.0", "port": 8123, "reload": True})]
