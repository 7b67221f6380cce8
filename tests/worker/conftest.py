"""Fixtures for worker tests.

The stub worker is a small Python program saved under the script name the
resolver looks for and run with the current interpreter as runtime.
"""

import sys
import textwrap
from pathlib import Path

import pytest  # type: ignore[import-not-found]

from hiworks_commute.worker.manager import WorkerManager
from hiworks_commute.worker.paths import SCRIPT_NAME, PathResolver

STUB_WORKER = textwrap.dedent(
    """
    import json
    import os
    import sys
    import time

    def emit(payload):
        sys.stdout.write(json.dumps(payload) + "\\n")
        sys.stdout.flush()

    spawn_log = os.environ.get("STUB_SPAWN_LOG")
    if spawn_log:
        with open(spawn_log, "a") as f:
            f.write(f"{os.getpid()}\\n")

    mode = os.environ.get("STUB_MODE", "ok")
    if mode == "not_ready":
        emit({"ready": False})
        time.sleep(30)
        sys.exit(0)
    elif mode == "garbage_ready":
        sys.stdout.write("starting up\\n")
        sys.stdout.flush()
        time.sleep(30)
        sys.exit(0)
    elif mode == "slow_ready":
        time.sleep(30)
        sys.exit(0)
    elif mode == "silent_exit":
        sys.exit(0)
    elif mode == "stray_output":
        emit({"ready": True})
        sys.stdout.write("debug: page loaded\\n")
        sys.stdout.flush()
    else:
        emit({"ready": True})

    for line in sys.stdin:
        cmd = json.loads(line)
        request_id = cmd["id"]
        action = cmd["action"]
        params = cmd["params"]

        if action == "echo":
            emit({"id": request_id, "success": True, "data": params})
        elif action == "echoId":
            emit({"id": request_id, "success": True, "data": request_id})
        elif action == "pid":
            emit({"id": request_id, "success": True, "data": os.getpid()})
        elif action == "getStatus":
            emit({"id": request_id, "success": True, "data": {"state": "WORK"}})
        elif action == "fail":
            emit({"id": request_id, "success": False, "data": "boom"})
        elif action == "failNoData":
            emit({"id": request_id, "success": False})
        elif action == "error":
            emit({"id": request_id, "error": "worker exploded"})
        elif action == "noData":
            emit({"id": request_id, "success": True})
        elif action == "garbage":
            sys.stdout.write("this is not json\\n")
            sys.stdout.flush()
        elif action == "wrongId":
            emit({"id": request_id + 1000, "success": True, "data": "late"})
        elif action == "nullData":
            emit({"id": request_id, "success": True, "data": None})
        elif action == "getCompanyUrl":
            emit({"id": request_id, "success": True, "data": os.environ.get("STUB_COMPANY_URL")})
        elif action == "exit":
            sys.exit(3)
        elif action == "hang":
            time.sleep(60)
        else:
            emit({"id": request_id, "success": True, "data": {"message": action + " done"}})
    """
)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a development layout with the stub worker script."""
    project = tmp_path / "project"
    scripts = project / "scripts"
    scripts.mkdir(parents=True)
    (scripts / SCRIPT_NAME).write_text(STUB_WORKER, encoding="utf-8")
    return project


@pytest.fixture
def stub_resolver(tmp_path: Path, project_dir: Path) -> PathResolver:
    """Resolver that finds the stub worker and runs it with this interpreter."""
    app_dir = tmp_path / "app"
    app_dir.mkdir()
    return PathResolver(
        executable_dir=app_dir,
        cwd=project_dir,
        home=tmp_path / "home",
        environ={"PATH": ""},
        runtime_override=Path(sys.executable),
        runtime_search_paths=[],
    )


@pytest.fixture
def spawn_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """File the stub worker appends its PID to on every start."""
    log = tmp_path / "spawns.log"
    monkeypatch.setenv("STUB_SPAWN_LOG", str(log))
    return log


@pytest.fixture
def manager(stub_resolver: PathResolver):
    """Worker manager driving the stub worker."""
    mgr = WorkerManager(stub_resolver)
    yield mgr
    mgr.stop()
