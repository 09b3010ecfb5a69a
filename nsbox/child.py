"""The process that runs inside the new namespaces and becomes the container."""

from __future__ import annotations

import os
import shutil
import socket
import subprocess
from collections.abc import Callable, Sequence

from nsbox.executor import SYNC_FD_ENV, ContainerError

DEFAULT_SYNC_FD = 3
CONTAINER_HOSTNAME = "container"
CONTAINER_PATH = "/bin:/sbin:/usr/bin:/usr/sbin"
CONTAINER_PROMPT = "container# "
OLD_ROOT = ".old_root"


def _run_tool(argv: Sequence[str]) -> None:
    try:
        result = subprocess.run(
            list(argv),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise ContainerError(f"{argv[0]}: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise ContainerError(f"{argv[0]}: {detail}")


def _status_to_exit_code(status: int) -> int:
    code = os.waitstatus_to_exitcode(status)
    return code if code >= 0 else 128 - code


class ChildProcess:
    """Prepares the container filesystem, signals the parent and execs the command."""

    def __init__(
        self,
        run_tool: Callable[[Sequence[str]], None] | None = None,
        set_hostname: Callable[[str], None] | None = None,
    ) -> None:
        self._run_tool = run_tool or _run_tool
        self._set_hostname = set_hostname or socket.sethostname

    def run(self, args: Sequence[str]) -> None:
        """Run with ``args`` = rootfs path followed by the command; does not return on success."""
        if not args:
            raise ContainerError("no rootfs specified")
        rootfs, command = args[0], list(args[1:])
        if not command:
            raise ContainerError("no command specified")

        self._become_namespace_init()
        try:
            self._setup_container(rootfs)
        except ContainerError as exc:
            raise ContainerError(f"failed to setup container: {exc}") from exc
        try:
            self._signal_parent()
        except ContainerError as exc:
            raise ContainerError(f"failed to signal parent: {exc}") from exc
        self._exec_command(command)

    def _become_namespace_init(self) -> None:
        """Fork into a pending PID namespace so the container runs there as PID 1."""
        try:
            current = os.readlink("/proc/self/ns/pid")
            pending = os.readlink("/proc/self/ns/pid_for_children")
        except OSError:
            return
        if current == pending:
            return
        pid = os.fork()
        if pid == 0:
            return
        _, status = os.waitpid(pid, 0)
        raise SystemExit(_status_to_exit_code(status))

    def _signal_parent(self) -> None:
        raw = os.environ.pop(SYNC_FD_ENV, str(DEFAULT_SYNC_FD))
        try:
            fd = int(raw)
        except ValueError:
            raise ContainerError("communication pipe not found") from None
        try:
            os.write(fd, b"\x01")
        except OSError as exc:
            raise ContainerError(f"failed to write to pipe: {exc}") from exc
        finally:
            try:
                os.close(fd)
            except OSError:
                pass

    def _step(self, message: str, action: Callable[..., object], *args: object) -> None:
        try:
            action(*args)
        except (ContainerError, OSError) as exc:
            raise ContainerError(f"{message}: {exc}") from exc

    def _setup_container(self, rootfs: str) -> None:
        self._step("failed to set hostname", self._set_hostname, CONTAINER_HOSTNAME)
        self._step(
            "failed to make root mount private",
            self._run_tool,
            ["mount", "--make-rprivate", "/"],
        )
        self._step(
            "failed to bind mount rootfs",
            self._run_tool,
            ["mount", "--rbind", rootfs, rootfs],
        )
        self._step("failed to chdir to rootfs", os.chdir, rootfs)
        self._step(
            "failed to create .old_root directory",
            os.makedirs,
            OLD_ROOT,
            0o700,
            True,
        )
        self._step("failed to pivot_root", self._run_tool, ["pivot_root", ".", OLD_ROOT])
        self._step("failed to chdir to new root", os.chdir, "/")
        self._step(
            "failed to unmount old_root",
            self._run_tool,
            ["umount", "-l", f"/{OLD_ROOT}"],
        )
        self._step("failed to remove old_root dir", self._remove_old_root)
        self._step(
            "failed to mount /proc",
            self._run_tool,
            ["mount", "-t", "proc", "proc", "/proc"],
        )
        self._step(
            "failed to mount /sys",
            self._run_tool,
            ["mount", "-t", "sysfs", "sysfs", "/sys"],
        )
        self._step(
            "failed to mount /dev",
            self._run_tool,
            ["mount", "-t", "tmpfs", "-o", "nosuid,strictatime,size=65536k", "tmpfs", "/dev"],
        )
        os.environ["PS1"] = CONTAINER_PROMPT
        os.environ["PATH"] = CONTAINER_PATH

    @staticmethod
    def _remove_old_root() -> None:
        try:
            shutil.rmtree(f"/{OLD_ROOT}")
        except FileNotFoundError:
            pass

    @staticmethod
    def _exec_command(command: list[str]) -> None:
        binary = shutil.which(command[0])
        if binary is None:
            raise ContainerError(f"executable not found: {command[0]}")
        try:
            os.execve(binary, command, os.environ)
        except OSError as exc:
            raise ContainerError(f"failed to exec {binary}: {exc}") from exc