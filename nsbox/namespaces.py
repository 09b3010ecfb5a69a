"""Namespace selection and bookkeeping for container processes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

CLONE_NEWNS = 0x00020000
CLONE_NEWUTS = 0x04000000
CLONE_NEWIPC = 0x08000000
CLONE_NEWUSER = 0x10000000
CLONE_NEWPID = 0x20000000
CLONE_NEWNET = 0x40000000


class ContainerNotFoundError(LookupError):
    """Raised when a container id is not known to a manager."""

    def __init__(self, container_id: str) -> None:
        super().__init__(f"container {container_id} not found")
        self.container_id = container_id


@dataclass
class NamespaceFlags:
    """Which Linux namespaces a container process gets."""

    uts: bool = False
    pid: bool = False
    net: bool = False
    mount: bool = False
    ipc: bool = False
    user: bool = False

    def to_clone_flags(self) -> int:
        """Return the clone(2) flag mask for the selected namespaces."""
        selected = (
            (self.uts, CLONE_NEWUTS),
            (self.pid, CLONE_NEWPID),
            (self.ipc, CLONE_NEWIPC),
            (self.mount, CLONE_NEWNS),
            (self.net, CLONE_NEWNET),
            (self.user, CLONE_NEWUSER),
        )
        flags = 0
        for enabled, bit in selected:
            if enabled:
                flags |= bit
        return flags


def default_namespace() -> NamespaceFlags:
    """Return the default namespace selection (network and user are off)."""
    return NamespaceFlags(uts=True, pid=True, net=False, mount=True, ipc=True, user=False)


class ProcessState(IntEnum):
    """Lifecycle state of a container process."""

    CREATED = 0
    RUNNING = 1
    STOPPED = 2
    FAILED = 3

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass
class ContainerProcess:
    """A process started inside a set of namespaces."""

    pid: int
    namespace: NamespaceFlags
    state: ProcessState = ProcessState.CREATED
    start_time: datetime = field(default_factory=datetime.now)
    exit_code: int = 0
    command: list[str] = field(default_factory=list)


class NamespaceManager:
    """Thread-safe registry of container processes keyed by container id."""

    def __init__(self) -> None:
        self._containers: dict[str, ContainerProcess] = {}
        self._lock = threading.RLock()

    def add_container(self, container_id: str, process: ContainerProcess) -> None:
        with self._lock:
            self._containers[container_id] = process

    def get_container(self, container_id: str) -> ContainerProcess | None:
        """Return the process for ``container_id``, or None if unknown."""
        with self._lock:
            return self._containers.get(container_id)

    def update_container_state(
        self,
        container_id: str,
        state: ProcessState,
        exit_code: int | None = None,
    ) -> None:
        """Set the state, and the exit code if given; raise if the id is unknown."""
        with self._lock:
            try:
                process = self._containers[container_id]
            except KeyError:
                raise ContainerNotFoundError(container_id) from None
            process.state = state
            if exit_code is not None:
                process.exit_code = exit_code

    def list_containers(self) -> dict[str, ContainerProcess]:
        """Return a snapshot of the registry."""
        with self._lock:
            return dict(self._containers)

    def remove_container(self, container_id: str) -> None:
        with self._lock:
            self._containers.pop(container_id, None)