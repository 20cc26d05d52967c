import subprocess
from pathlib import Path

import pytest

from timecards.modules import document_converter
from timecards.modules.document_converter import DocumentConverter


def fake_run_writing_pdf(calls):
    def run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        outdir = Path(cmd[cmd.index("--outdir") + 1])
        source = Path(cmd[-1])
        assert source.read_bytes() == b"xlsx-bytes"
        (outdir / f"{source.stem}.pdf").write_bytes(b"%PDF-1.4 fake")
        return subprocess.CompletedProcess(cmd, 0, stdout="convert ok", stderr="")

    return run


def test_convert_returns_pdf_bytes(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(document_converter.subprocess, "run", fake_run_writing_pdf(calls))
    pdf = DocumentConverter(tmp_dir=tmp_path).convert(b"xlsx-bytes", "timecard_Jane.xlsx")
    assert pdf == b"%PDF-1.4 fake"
    cmd, kwargs = calls[0]
    assert cmd[:4] == ["soffice", "--headless", "--convert-to", "pdf"]
    assert Path(cmd[-1]).name == "timecard_Jane.xlsx"
    assert kwargs["timeout"] == 120.0
    # Arbeitsverzeichnis wird aufgeräumt
    assert list(tmp_path.iterdir()) == []


def test_non_zero_exit_raises(monkeypatch):
    monkeypatch.setattr(
        document_converter.subprocess,
        "run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="boom"),
    )
    with pytest.raises(RuntimeError, match="boom"):
        DocumentConverter().convert(b"x")


def test_timeout_raises(monkeypatch):
    def run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(document_converter.subprocess, "run", run)
    with pytest.raises(RuntimeError, match="abgebrochen"):
        DocumentConverter(timeout_seconds=1).convert(b"x")


def test_missing_output_raises(monkeypatch):
    monkeypatch.setattr(
        document_converter.subprocess,
        "run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 0, stdout="", stderr=""),
    )
    with pytest.raises(RuntimeError, match="kein PDF"):
        DocumentConverter().convert(b"x")


def test_missing_binary_raises(monkeypatch):
    def run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(document_converter.subprocess, "run", run)
    with pytest.raises(RuntimeError, match="nicht gestartet"):
        DocumentConverter(binary="no-such-office").convert(b"x")
