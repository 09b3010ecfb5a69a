"""Container configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from nsbox.namespaces import NamespaceFlags, default_namespace


@dataclass
class ContainerConfig:
    """Settings for one container; field defaults are the stock configuration."""

    image: str = "default"
    command: list[str] = field(default_factory=lambda: ["/bin/sh"])
    namespaces: NamespaceFlags = field(default_factory=default_namespace)
    hostname: str = "container-host"
    working_dir: str = "/"
    env: list[str] = field(default_factory=list)
    rootfs: str = "./busybox-rootfs"


def default_container_config() -> ContainerConfig:
    """Return a fresh configuration with the stock defaults."""
    return ContainerConfig()