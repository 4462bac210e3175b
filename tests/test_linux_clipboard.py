import asyncio
import subprocess
from pathlib import Path

import pytest

from nacoclip.clipboard import linux
from nacoclip.clipboard.linux import LinuxClipboard


class FakeRun:
    """Stands in for subprocess.run and answers xclip/wl-paste reads."""

    def __init__(self, outputs=None, error=None):
        self.outputs = outputs or {}
        self.error = error
        self.calls = []

    def __call__(self, command, input=None, **kwargs):
        self.calls.append((command, input))
        if self.error is not None:
            raise self.error
        stdout = self.outputs.get(tuple(command), b"")
        return subprocess.CompletedProcess(command, 0, stdout=stdout, stderr=b"")


@pytest.fixture
def xclip_only(monkeypatch):
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.setattr(linux.shutil, "which",
                        lambda name: "/usr/bin/xclip" if name == "xclip" else None)


@pytest.fixture
def wayland(monkeypatch):
    monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-0")
    monkeypatch.setattr(linux.shutil, "which", lambda name: f"/usr/bin/{name}")


def test_write_text_with_xclip(xclip_only, monkeypatch):
    run = FakeRun()
    monkeypatch.setattr(linux.subprocess, "run", run)

    assert LinuxClipboard().write_text("hello") is True
    assert run.calls == [(["xclip", "-selection", "clipboard"], b"hello")]


def test_write_image_with_wayland(wayland, monkeypatch):
    run = FakeRun()
    monkeypatch.setattr(linux.subprocess, "run", run)

    assert LinuxClipboard().write_image(b"PNGDATA", "image/png") is True
    assert run.calls == [(["wl-copy", "--type", "image/png"], b"PNGDATA")]


def test_write_files_as_uri_list(xclip_only, monkeypatch, tmp_path):
    run = FakeRun()
    monkeypatch.setattr(linux.subprocess, "run", run)
    target = tmp_path / "doc.pdf"

    assert LinuxClipboard().write_files([target]) is True
    command, data = run.calls[0]
    assert command == ["xclip", "-selection", "clipboard", "-t", "text/uri-list"]
    assert data == target.resolve().as_uri().encode("utf-8")


def test_write_without_tools(monkeypatch):
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.setattr(linux.shutil, "which", lambda name: None)

    assert LinuxClipboard().write_text("hello") is False


def test_write_failure_returns_false(xclip_only, monkeypatch):
    run = FakeRun(error=subprocess.CalledProcessError(1, ["xclip"]))
    monkeypatch.setattr(linux.subprocess, "run", run)

    assert LinuxClipboard().write_text("hello") is False


def test_read_items_from_xclip(xclip_only, monkeypatch):
    base = ("xclip", "-selection", "clipboard", "-t")
    run = FakeRun(outputs={
        base + ("TARGETS", "-o"): b"TARGETS\nTIMESTAMP\nUTF8_STRING\nimage/png\n",
        base + ("UTF8_STRING", "-o"): "café".encode("utf-8"),
        base + ("image/png", "-o"): b"\x89PNG",
    })
    monkeypatch.setattr(linux.subprocess, "run", run)

    items = LinuxClipboard().read_items()

    assert [item.mime_type for item in items] == ["image/png", "text/plain"]
    assert asyncio.run(items[0].read()) == b"\x89PNG"
    assert asyncio.run(items[1].read()) == "café"


def test_read_copied_files(xclip_only, monkeypatch, tmp_path):
    picture = tmp_path / "my picture.png"
    picture.write_bytes(b"\x89PNG")
    base = ("xclip", "-selection", "clipboard", "-t")
    run = FakeRun(outputs={
        base + ("TARGETS", "-o"): b"x-special/gnome-copied-files\n",
        base + ("x-special/gnome-copied-files", "-o"):
            b"copy\n" + picture.as_uri().encode("utf-8"),
    })
    monkeypatch.setattr(linux.subprocess, "run", run)

    items = LinuxClipboard().read_items()

    assert [item.mime_type for item in items] == ["image/png"]
    assert asyncio.run(items[0].read()) == b"\x89PNG"


def test_parse_paths():
    data = b"copy\nfile:///tmp/a%20b.txt\n# comment\n/tmp/plain.txt\n"

    assert LinuxClipboard()._parse_paths(data) == [Path("/tmp/a b.txt"), Path("/tmp/plain.txt")]
