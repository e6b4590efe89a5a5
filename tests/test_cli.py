import json
import socket

import pytest

from conftest import strip_ansi
from portscanner.cli import build_parser, main


@pytest.fixture
def backlog_listener():
    # the kernel completes the handshake from the backlog; nobody ever answers
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        s.listen(8)
        yield s.getsockname()[1]


def test_defaults():
    args = build_parser().parse_args(["--ip", "127.0.0.1"])
    assert args.output == "text"
    assert args.ports is None
    assert args.concurrency == 1000
    assert args.sort is False


def test_no_target_prints_error(capsys):
    assert main([]) == 1
    out = strip_ansi(capsys.readouterr().out)
    assert "provide either --ip or --url" in out
    assert "--help" in out


def test_ip_and_url_are_mutually_exclusive():
    with pytest.raises(SystemExit) as exc:
        main(["--ip", "127.0.0.1", "--url", "http://example.com"])
    assert exc.value.code == 2


def test_ports_requires_ip():
    with pytest.raises(SystemExit) as exc:
        main(["--ports", "1-100"])
    assert exc.value.code == 2


def test_bad_output_mode_is_rejected():
    with pytest.raises(SystemExit):
        main(["--ip", "127.0.0.1", "--output", "xml"])


def test_invalid_ip_is_reported_once(capsys):
    assert main(["--ip", "999.999.1.1", "--ports", "1-10"]) == 1
    out = strip_ansi(capsys.readouterr().out)
    assert out.count("Invalid IP address format") == 1
    assert "Hostname:" not in out


def test_text_scan(capsys, backlog_listener):
    port = backlog_listener
    rc = main(["--ip", "127.0.0.1", "--ports", f"{port}-{port}", "--read-timeout", "0.2"])
    assert rc == 0
    out = strip_ansi(capsys.readouterr().out)
    assert "Starting scan for IP address 127.0.0.1" in out
    assert out.count("Hostname:") == 1
    assert out.index("Hostname:") < out.index(f"Port {port} open")
    assert "Service: No service information received" in out


def test_json_scan_writes_file(tmp_path, monkeypatch, capsys, backlog_listener):
    port = backlog_listener
    monkeypatch.chdir(tmp_path)
    rc = main(["--ip", "127.0.0.1", "--ports", f"{port}-{port}", "--output", "json",
               "--read-timeout", "0.2"])
    assert rc == 0
    data = json.loads((tmp_path / "port_scan_127.0.0.1.json").read_text(encoding="utf-8"))
    assert data["ip_address"] == "127.0.0.1"
    assert isinstance(data["hostname"], str)
    assert data["open_ports"] == [{
        "port": port,
        "is_open": True,
        "service_banner": "No service information received",
        "response_time_ms": data["open_ports"][0]["response_time_ms"],
    }]
    out = strip_ansi(capsys.readouterr().out)
    assert "Results saved to" in out
    assert "Port " not in out


def test_url_json(tmp_path, monkeypatch, demo_lab_url):
    monkeypatch.chdir(tmp_path)
    assert main(["--url", demo_lab_url + "/", "--output", "json"]) == 0
    data = json.loads((tmp_path / "url_report.json").read_text(encoding="utf-8"))
    assert data["page_title"] == "Demo Lab Home"
    assert data["robots_txt_found"] is True


def test_url_failure_exits_with_error(capsys):
    assert main(["--url", "no-scheme-here"]) == 1
    assert "Could not fetch" in strip_ansi(capsys.readouterr().out)
