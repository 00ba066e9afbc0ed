import subprocess
from types import SimpleNamespace

import pytest

from schulte.modules.emu import adb as adb_module
from schulte.modules.emu.adapter import DeviceAdapter, DeviceConfig
from schulte.modules.emu.adb import Adb, AdbError
from schulte.modules.tree.hierarchy import SnapshotUnavailable

DUMP = (
    b"UI hierchary dumped to: /dev/tty\n"
    b'<?xml version="1.0" encoding="UTF-8"?><hierarchy rotation="0">'
    b'<node index="0" text="" class="android.widget.FrameLayout" content-desc="" '
    b'clickable="false" bounds="[0,0][1080,1920]">'
    b'<node index="0" text="1" class="android.widget.TextView" content-desc="" '
    b'clickable="true" bounds="[100,200][300,400]" />'
    b"</node></hierarchy>"
)


class _Recorder:
    def __init__(self, returncode=0, stdout=b"", stderr=b"", raises=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.raises is not None:
            raise self.raises
        return SimpleNamespace(returncode=self.returncode, stdout=self.stdout, stderr=self.stderr)


def test_press_is_swipe_in_place(monkeypatch):
    recorder = _Recorder()
    monkeypatch.setattr(adb_module.subprocess, "run", recorder)

    Adb("adb").press("emulator-5554", 150, 300, 50)

    args, kwargs = recorder.calls[0]
    assert args == [
        "adb", "-s", "emulator-5554", "shell", "input", "swipe",
        "150", "300", "150", "300", "50",
    ]
    assert kwargs["timeout"] == 10.0


def test_press_failure_raises(monkeypatch):
    monkeypatch.setattr(adb_module.subprocess, "run", _Recorder(returncode=1, stderr=b"error: closed"))

    with pytest.raises(AdbError, match="closed"):
        Adb().press("emulator-5554", 1, 2)


def test_missing_binary_raises_adb_error(monkeypatch):
    monkeypatch.setattr(adb_module.subprocess, "run", _Recorder(raises=FileNotFoundError()))

    with pytest.raises(AdbError, match="找不到"):
        Adb("/nope/adb").devices()


def test_timeout_raises_adb_error(monkeypatch):
    monkeypatch.setattr(
        adb_module.subprocess,
        "run",
        _Recorder(raises=subprocess.TimeoutExpired(cmd="adb", timeout=1)),
    )

    with pytest.raises(AdbError, match="超时"):
        Adb().dump_hierarchy("emulator-5554", timeout=1)


def test_dump_hierarchy_returns_stdout(monkeypatch):
    recorder = _Recorder(stdout=DUMP)
    monkeypatch.setattr(adb_module.subprocess, "run", recorder)

    assert Adb().dump_hierarchy("emulator-5554") == DUMP
    args, _ = recorder.calls[0]
    assert args[-4:] == ["exec-out", "uiautomator", "dump", "/dev/tty"]


def test_devices_parses_ready_devices_only(monkeypatch):
    out = b"List of devices attached\n127.0.0.1:5555\tdevice\nemulator-5556\toffline\n\n"
    monkeypatch.setattr(adb_module.subprocess, "run", _Recorder(stdout=out))

    assert Adb().devices() == ["127.0.0.1:5555"]


def test_adapter_snapshot_parses_dump(monkeypatch):
    monkeypatch.setattr(adb_module.subprocess, "run", _Recorder(stdout=DUMP))
    adapter = DeviceAdapter(DeviceConfig(adb_path="adb", adb_addr="emulator-5554"))

    root = adapter.snapshot()

    assert root.children[0].text == "1"
    assert root.children[0].is_interactive


def test_adapter_snapshot_wraps_adb_errors(monkeypatch):
    monkeypatch.setattr(adb_module.subprocess, "run", _Recorder(returncode=1, stderr=b"no device"))
    adapter = DeviceAdapter(DeviceConfig(adb_path="adb", adb_addr="emulator-5554"))

    with pytest.raises(SnapshotUnavailable):
        adapter.snapshot()


def test_ensure_connected_connects_network_address(monkeypatch):
    outputs = iter([
        SimpleNamespace(returncode=0, stdout=b"connected to 127.0.0.1:5555", stderr=b""),
        SimpleNamespace(returncode=0, stdout=b"List of devices attached\n127.0.0.1:5555\tdevice\n", stderr=b""),
    ])
    calls = []

    def _run(args, **kwargs):
        calls.append(args)
        return next(outputs)

    monkeypatch.setattr(adb_module.subprocess, "run", _run)
    adapter = DeviceAdapter(DeviceConfig(adb_path="adb", adb_addr="127.0.0.1:5555"))

    assert adapter.ensure_connected() is True
    assert calls[0] == ["adb", "connect", "127.0.0.1:5555"]


def test_ensure_connected_false_when_adb_missing(monkeypatch):
    monkeypatch.setattr(adb_module.subprocess, "run", _Recorder(raises=FileNotFoundError()))
    adapter = DeviceAdapter(DeviceConfig(adb_path="adb", adb_addr="emulator-5554"))

    assert adapter.ensure_connected() is False
