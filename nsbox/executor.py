"""Start container processes inside fresh namespaces."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import IO

from nsbox.namespaces import ContainerProcess, NamespaceFlags, ProcessState

SYNC_FD_ENV = "NSBOX_SYNC_FD"
DEFAULT_LAUNCHER: tuple[str, ...] = (sys.executable, "-m", "nsbox.cli")


class ContainerError(RuntimeError):
    """Raised when a container cannot be created, set up or waited for."""


def wait_pid(pid: int) -> int:
    """Wait for child ``pid``; return its exit status, or -1 if it did not exit normally."""
    _, status = os.waitpid(pid, 0)
    return os.WEXITSTATUS(status) if os.WIFEXITED(status) else -1


@dataclass
class LaunchedProcess(ContainerProcess):
    """A container process together with the handle of the started child."""

    handle: subprocess.Popen | None = field(default=None, repr=False, compare=False)

    def wait(self) -> int:
        """Block until the process ends; return its exit status, or -1 if killed."""
        if self.handle is None:
            return wait_pid(self.pid)
        code = self.handle.wait()
        return code if code >= 0 else -1


class ProcessExecutor:
    """Launches the child side of the runtime in the configured namespaces."""

    def __init__(
        self,
        config: NamespaceFlags,
        launcher: Sequence[str] | None = None,
    ) -> None:
        self.config = config
        self.launcher = tuple(launcher) if launcher is not None else DEFAULT_LAUNCHER
        self.stdin: IO | None = None
        self.stdout: IO | None = None
        self.stderr: IO | None = None

    def set_io(self, stdin: IO | None, stdout: IO | None, stderr: IO | None) -> None:
        """Set the streams given to the container; None inherits this process's."""
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr

    def create_container(self, command: Sequence[str], rootfs: str) -> LaunchedProcess:
        """Start ``command`` in ``rootfs`` and wait until the child reports it is set up."""
        if not command:
            raise ContainerError("no command specified")

        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            raise ContainerError(f"failed to create communication pipe: {exc}") from exc

        argv = [*self.launcher, "child", rootfs, *command]
        env = {**os.environ, SYNC_FD_ENV: str(write_fd)}
        flags = self.config.to_clone_flags()
        preexec = partial(os.unshare, flags) if flags else None

        with os.fdopen(read_fd, "rb", buffering=0) as reader:
            try:
                handle = subprocess.Popen(
                    argv,
                    stdin=self.stdin,
                    stdout=self.stdout,
                    stderr=self.stderr,
                    env=env,
                    pass_fds=(write_fd,),
                    preexec_fn=preexec,
                )
            except (OSError, subprocess.SubprocessError) as exc:
                raise ContainerError(f"failed to start container process: {exc}") from exc
            finally:
                os.close(write_fd)

            try:
                ready = reader.read(1)
            except OSError as exc:
                ready = b""
                reason = str(exc)
            else:
                reason = "child exited before signalling readiness"
            if not ready:
                handle.kill()
                handle.wait()
                raise ContainerError(f"child process setup failed: {reason}")

        return LaunchedProcess(
            pid=handle.pid,
            namespace=self.config,
            state=ProcessState.RUNNING,
            start_time=datetime.now(),
            command=list(command),
            handle=handle,
        )