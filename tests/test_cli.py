from nsbox.cli import handle_child, handle_run, main


def test_no_arguments_prints_usage(capsys):
    assert main([]) == 1
    out = capsys.readouterr().out
    assert "Commands:" in out
    assert "run <image> [command]  - Run a container" in out


def test_run_without_image(capsys):
    assert main(["run"]) == 1
    assert "Usage: run <image> [command]" in capsys.readouterr().out


def test_child_without_arguments(capsys):
    assert main(["child"]) == 1
    assert "No command specified for child" in capsys.readouterr().out


def test_unknown_command(capsys):
    assert main(["bogus"]) == 1
    assert "Unknown command: bogus" in capsys.readouterr().out


def test_handle_child_without_command_reports_failure(capsys):
    assert handle_child(["/rootfs"]) == 1
    assert "Child process failed: no command specified" in capsys.readouterr().out


def test_main_child_dispatches_to_handle_child(capsys):
    assert main(["child", "/rootfs"]) == 1
    assert "Child process failed" in capsys.readouterr().out


def test_handle_run_without_args(capsys):
    assert handle_run([]) == 1
    assert "Usage: run <image> [command]" in capsys.readouterr().out


def test_handle_run_without_rootfs_fails_to_create(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert handle_run(["image", "/bin/true"]) == 1
    assert "Failed to create container:" in capsys.readouterr().out