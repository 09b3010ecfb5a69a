"""Container lifecycle management."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass

from nsbox.config import ContainerConfig
from nsbox.executor import ContainerError, LaunchedProcess, ProcessExecutor, wait_pid
from nsbox.namespaces import (
    ContainerNotFoundError,
    ContainerProcess,
    NamespaceFlags,
    NamespaceManager,
    ProcessState,
)


@dataclass
class RunningContainer:
    """A created container and the process backing it."""

    id: str
    config: ContainerConfig
    process: ContainerProcess


class RuntimeManager:
    """Creates, starts and waits for containers."""

    def __init__(
        self,
        executor_factory: Callable[[NamespaceFlags], ProcessExecutor] = ProcessExecutor,
    ) -> None:
        self.namespaces = NamespaceManager()
        self.containers: dict[str, RunningContainer] = {}
        self._executor_factory = executor_factory

    def create_container(self, config: ContainerConfig) -> str:
        """Start the container process for ``config`` and return the new container id."""
        container_id = f"container-{secrets.token_hex(8)}"
        executor = self._executor_factory(config.namespaces)
        try:
            process = executor.create_container(config.command, config.rootfs)
        except ContainerError as exc:
            raise ContainerError(f"failed to create container process: {exc}") from exc

        self.containers[container_id] = RunningContainer(container_id, config, process)
        self.namespaces.add_container(container_id, process)
        return container_id

    def start_container(self, container_id: str) -> None:
        container = self._lookup(container_id)
        print(f"Container {container_id} started with PID {container.process.pid}")

    def wait_container(self, container_id: str) -> int:
        """Wait for the container to exit, record its final state and return its exit code."""
        container = self._lookup(container_id)
        process = container.process
        try:
            if isinstance(process, LaunchedProcess):
                exit_code = process.wait()
            else:
                exit_code = wait_pid(process.pid)
        except OSError as exc:
            raise ContainerError(f"error waiting for container: {exc}") from exc

        state = ProcessState.STOPPED if exit_code == 0 else ProcessState.FAILED
        self.namespaces.update_container_state(container_id, state, exit_code)
        print(f"Container {container_id} finished with exit code {exit_code}")
        return exit_code

    def _lookup(self, container_id: str) -> RunningContainer:
        try:
            return self.containers[container_id]
        except KeyError:
            raise ContainerNotFoundError(container_id) from None