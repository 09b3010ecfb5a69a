# nsbox

A small container runtime for Linux. It starts a command inside fresh UTS,
PID, mount and IPC namespaces, switches its root filesystem with
`pivot_root`, mounts `/proc`, `/sys` and a tmpfs `/dev`, and waits for the
command to finish.

## Requirements

- Linux
- Root privileges (namespaces, mounts and `pivot_root` need them)
- The `mount`, `umount` and `pivot_root` tools on the host's `PATH`; the
  in-container setup runs them
- An unpacked root filesystem at `./busybox-rootfs` (relative to the
  directory you run from)

## Installation

```sh
pip install .
```

## Usage

Run a container, giving an image name and, if you like, a command. Without a
command it starts `/bin/sh`:

```sh
sudo nsbox run default
sudo nsbox run default /bin/ls -l /
```

The runtime prints the container's identifier and PID, and when the command
exits it reports the exit code:

```
Starting container container-1a2b3c4d5e6f7a8b...
Container container-1a2b3c4d5e6f7a8b started with PID 12345
Container container-1a2b3c4d5e6f7a8b finished with exit code 0
```

If the container cannot be created or waited for, a message is printed and
`nsbox` exits with status 1.

Inside the container the hostname is `container`, `PATH` is
`/bin:/sbin:/usr/bin:/usr/sbin` and `PS1` is `container# `.

`nsbox child <rootfs> <command...>` is the internal entry point the runtime
starts (as `python -m nsbox.cli child ...`) inside the new namespaces. It
prepares the filesystem, tells the parent over a pipe that setup is done,
and then replaces itself with the command. Do not call it yourself.

## Library use

```python
from nsbox.config import default_container_config
from nsbox.runtime import RuntimeManager

config = default_container_config()
config.command = ["/bin/echo", "hello"]

manager = RuntimeManager()
container_id = manager.create_container(config)
manager.start_container(container_id)
exit_code = manager.wait_container(container_id)
```

- `nsbox.namespaces.NamespaceFlags` selects which namespaces to create, and
  `to_clone_flags()` gives the matching clone flag mask.
  `default_namespace()` enables UTS, PID, mount and IPC.
- `nsbox.namespaces.NamespaceManager` is a thread-safe registry of
  `ContainerProcess` records with their `ProcessState`.
- `nsbox.executor.ProcessExecutor` launches the child side;
  `set_io()` chooses the streams the container gets.
- Failures raise `nsbox.executor.ContainerError`; unknown container ids raise
  `nsbox.namespaces.ContainerNotFoundError`.
- `nsbox.fileutil` has small helpers for reading and writing strings and
  integers in files.

## What it does not do

- The image name is only recorded; no images are fetched or unpacked. The
  root filesystem is always the configured `rootfs`.
- `ContainerConfig.hostname`, `working_dir` and `env` are stored but not
  applied to the container.
- No network setup, resource limits, or listing and stopping of containers
  from the command line. Network and user namespaces are off by default.

## Tests

```sh
pip install .[test]
pytest
```