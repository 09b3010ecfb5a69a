import re
import sys

import pytest

from nsbox.config import ContainerConfig
from nsbox.executor import SYNC_FD_ENV, ContainerError, ProcessExecutor
from nsbox.namespaces import ContainerNotFoundError, NamespaceFlags, ProcessState
from nsbox.runtime import RuntimeManager

READY_SCRIPT = f"""
import os, sys
os.write(int(os.environ["{SYNC_FD_ENV}"]), b"\\x01")
sys.exit(int(sys.argv[-1]))
"""

SILENT_SCRIPT = """
import sys
sys.exit(2)
"""


def _manager(tmp_path, body):
    script = tmp_path / "launch.py"
    script.write_text(body)
    launcher = [sys.executable, str(script)]
    return RuntimeManager(lambda flags: ProcessExecutor(flags, launcher=launcher))


def _config(code):
    return ContainerConfig(command=["prog", str(code)], namespaces=NamespaceFlags())


def test_create_container_returns_generated_id(tmp_path):
    manager = _manager(tmp_path, READY_SCRIPT)
    container_id = manager.create_container(_config(0))
    manager.wait_container(container_id)
    assert re.fullmatch(r"container-[0-9a-f]{16}", container_id)
    assert manager.namespaces.get_container(container_id) is manager.containers[container_id].process


def test_ids_are_unique(tmp_path):
    manager = _manager(tmp_path, READY_SCRIPT)
    first = manager.create_container(_config(0))
    second = manager.create_container(_config(0))
    manager.wait_container(first)
    manager.wait_container(second)
    assert first != second
    assert set(manager.containers) == {first, second}


def test_start_and_wait_success(tmp_path, capsys):
    manager = _manager(tmp_path, READY_SCRIPT)
    container_id = manager.create_container(_config(0))
    pid = manager.containers[container_id].process.pid
    manager.start_container(container_id)
    assert manager.wait_container(container_id) == 0
    out = capsys.readouterr().out
    assert f"Container {container_id} started with PID {pid}" in out
    assert f"Container {container_id} finished with exit code 0" in out
    process = manager.namespaces.get_container(container_id)
    assert process.state is ProcessState.STOPPED
    assert process.exit_code == 0


def test_nonzero_exit_marks_failed(tmp_path):
    manager = _manager(tmp_path, READY_SCRIPT)
    container_id = manager.create_container(_config(4))
    assert manager.wait_container(container_id) == 4
    process = manager.namespaces.get_container(container_id)
    assert process.state is ProcessState.FAILED
    assert process.exit_code == 4


def test_unknown_container_raises(tmp_path):
    manager = _manager(tmp_path, READY_SCRIPT)
    with pytest.raises(ContainerNotFoundError, match="container nope not found"):
        manager.start_container("nope")
    with pytest.raises(ContainerNotFoundError):
        manager.wait_container("nope")


def test_creation_failure_is_wrapped(tmp_path):
    manager = _manager(tmp_path, SILENT_SCRIPT)
    with pytest.raises(ContainerError, match="failed to create container process"):
        manager.create_container(_config(0))
    assert manager.containers == {}