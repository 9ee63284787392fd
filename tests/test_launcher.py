"""Test the command line entry point."""

from dynamic_epp import dynamic_epp_launcher as launcher

def test_parse_args():
    args = launcher.parse_args(["--debug", "--config", "/tmp/x.yaml"])
    assert args.debug and not args.info
    assert args.config == "/tmp/x.yaml"

def test_refuses_non_root(monkeypatch, capsys):
    monkeypatch.setattr(launcher.os, "geteuid", lambda: 1000)
    assert launcher.main([]) == 1
    assert "must be run as root" in capsys.readouterr().err

def test_bad_config(tmp_path, monkeypatch):
    path = tmp_path / "dynamic-epp.yaml"
    path.write_text("daemon:\n  queue_size: -1\n")
    monkeypatch.setattr(launcher.os, "geteuid", lambda: 0)
    assert launcher.main(["--config", str(path)]) == 1

def test_info_does_not_need_root(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(launcher.os, "geteuid", lambda: 1000)
    monkeypatch.setattr(launcher, "print_info", lambda cfg, sysfs: calls.append(sysfs.root))

    path = tmp_path / "dynamic-epp.yaml"
    path.write_text(f"sysfs:\n  root: {tmp_path}/cpu\n")
    assert launcher.main(["--info", "--config", str(path)]) == 0
    assert calls == [f"{tmp_path}/cpu"]
