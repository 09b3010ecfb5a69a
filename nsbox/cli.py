"""Command-line entry point: run containers and act as their child process."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from nsbox.child import ChildProcess
from nsbox.config import default_container_config
from nsbox.executor import ContainerError
from nsbox.runtime import RuntimeManager


def _print_usage() -> None:
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "nsbox"
    print(f"Usage: {prog} <command> [args...]")
    print("Commands:")
    print("  run <image> [command]  - Run a container")
    print("  child [command]        - Internal child process (don't call directly)")


def handle_run(args: Sequence[str]) -> int:
    """Create, start and wait for a container; return the process exit status."""
    if not args:
        print("Usage: run <image> [command]")
        return 1
    config = default_container_config()
    config.image = args[0]
    if len(args) > 1:
        config.command = list(args[1:])

    runtime = RuntimeManager()
    try:
        container_id = runtime.create_container(config)
    except ContainerError as exc:
        print(f"Failed to create container: {exc}")
        return 1

    print(f"Starting container {container_id}...")
    try:
        runtime.start_container(container_id)
    except LookupError as exc:
        print(f"Failed to start container: {exc}")
        return 1

    try:
        runtime.wait_container(container_id)
    except (ContainerError, LookupError) as exc:
        print(f"Container error: {exc}")
        return 1
    return 0


def handle_child(args: Sequence[str]) -> int:
    """Run the in-container side; only returns if setup or exec fails."""
    try:
        ChildProcess().run(args)
    except ContainerError as exc:
        print(f"Child process failed: {exc}")
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _print_usage()
        return 1

    command, rest = args[0], args[1:]
    match command:
        case "run":
            if not rest:
                print("Usage: run <image> [command]")
                return 1
            return handle_run(rest)
        case "child":
            if not rest:
                print("No command specified for child")
                return 1
            return handle_child(rest)
        case _:
            print(f"Unknown command: {command}")
            return 1


if __name__ == "__main__":
    sys.exit(main())