from nsbox.config import ContainerConfig, default_container_config
from nsbox.namespaces import default_namespace


def test_default_config_values():
    config = default_container_config()
    assert config.image == "default"
    assert config.command == ["/bin/sh"]
    assert config.hostname == "container-host"
    assert config.working_dir == "/"
    assert config.env == []
    assert config.rootfs == "./busybox-rootfs"


def test_default_config_uses_default_namespaces():
    config = default_container_config()
    assert config.namespaces == default_namespace()
    assert config.namespaces.net is False


def test_default_configs_do_not_share_state():
    first = default_container_config()
    second = default_container_config()
    first.command.append("-c")
    first.env.append("A=1")
    first.namespaces.net = True
    assert second.command == ["/bin/sh"]
    assert second.env == []
    assert second.namespaces.net is False


def test_override_fields():
    config = ContainerConfig(image="alpine", command=["/bin/echo", "hi"])
    assert config.image == "alpine"
    assert config.command == ["/bin/echo", "hi"]
    assert config.rootfs == default_container_config().rootfs