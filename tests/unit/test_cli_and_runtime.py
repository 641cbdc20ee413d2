# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io
import json

import pytest

from hcping.cli.main import build_parser, main
from hcping.config import PingSettings
from hcping.http.adapters import StubHttpClient
from hcping.http.models import HttpResponse
from hcping.runtime import Healthchecks

CHECK = "2d0a34bd-854d-490e-be2c-1493f7053460"
OTHER = "7b3f9c1a-0d4e-4f5a-8b6c-2e1d0a9f8c7b"
OK = HttpResponse(ok=True, status_code=200)


@pytest.fixture(autouse=True)
def _quiet_env(monkeypatch):
    for name in ("HCPING_PING_URL", "HCPING_USER_AGENT", "HCPING_MAX_RETRIES", "HEALTHCHECKS_TOKEN"):
        monkeypatch.delenv(name, raising=False)


def test_build_parser():
    args = build_parser().parse_args([CHECK, "fail", "--logs", "-", "--run-id", "abc", "--json"])
    assert args.check == CHECK
    assert args.event == "fail"
    assert args.logs == "-"
    assert args.run_id == "abc"
    assert args.json is True


def test_main_sends_success_ping():
    client = StubHttpClient([OK])
    assert main([CHECK, "success", "--user-agent", "cron/1"], http_client=client) == 0
    request = client.requests[0]
    assert request.method == "GET"
    assert request.url == f"https://hc-ping.com/{CHECK}"
    assert request.headers["User-Agent"] == "cron/1"
    assert client.closed is False


def test_main_fail_with_logs_from_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("stack trace\n"))
    client = StubHttpClient([OK])
    assert main([CHECK, "fail", "--logs", "-", "--run-id", "r1"], http_client=client) == 0
    request = client.requests[0]
    assert request.method == "POST"
    assert request.url == f"https://hc-ping.com/{CHECK}/fail?rid=r1"
    assert request.body == "stack trace\n"


def test_main_fail_with_logs_from_file(tmp_path):
    log_file = tmp_path / "job.log"
    log_file.write_text("disk full", encoding="utf-8")
    client = StubHttpClient([OK])
    assert main([CHECK, "fail", "--logs", str(log_file)], http_client=client) == 0
    assert client.requests[0].body == "disk full"


def test_main_missing_logs_file_is_a_usage_error(tmp_path, capsys):
    client = StubHttpClient([OK])
    with pytest.raises(SystemExit) as excinfo:
        main([CHECK, "fail", "--logs", str(tmp_path / "missing.log")], http_client=client)
    assert excinfo.value.code == 2
    assert "cannot read logs" in capsys.readouterr().err
    assert client.calls == 0


def test_main_rejects_logs_for_non_fail_events():
    with pytest.raises(SystemExit):
        main([CHECK, "start", "--logs", "-"], http_client=StubHttpClient([OK]))


def test_main_reads_token_from_env(monkeypatch):
    monkeypatch.setenv("HEALTHCHECKS_TOKEN", CHECK)
    client = StubHttpClient([OK])
    assert main(["-", "start", "--ping-url", "https://ping.example.org"], http_client=client) == 0
    assert client.requests[0].url == f"https://ping.example.org/{CHECK}/start"


def test_main_invalid_check_returns_2(capsys):
    assert main(["not-a-uuid", "success"], http_client=StubHttpClient([OK])) == 2
    assert "invalid UUID" in capsys.readouterr().err


def test_main_unacknowledged_ping_warns_and_returns_1(monkeypatch, capsys):
    monkeypatch.setenv("HCPING_MAX_RETRIES", "2")
    client = StubHttpClient([HttpResponse.from_status(500)])
    assert main([CHECK, "fail"], http_client=client) == 1
    assert client.calls == 2
    assert "not acknowledged after 2 attempt(s)" in capsys.readouterr().err


def test_main_json_output(capsys):
    assert main([CHECK, "start", "--json"], http_client=StubHttpClient([OK])) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["succeeded"] is True
    assert payload["event"] == "start"
    assert payload["attempts"] == 1
    assert payload["failure"] == "NONE"


def test_healthchecks_facade_shares_client():
    client = StubHttpClient([OK])
    with Healthchecks(http_client=client, settings=PingSettings(max_retries=3)) as hc:
        first = hc.reporter(CHECK)
        second = hc.reporter(OTHER, user_agent="job-b/1.0")
        assert first.http_client is second.http_client is client
        assert first.retry_config.max_attempts == 3
        assert first.report_success()
        assert second.start_timer()
    assert client.closed is True
    assert [r.url for r in client.requests] == [
        f"https://hc-ping.com/{CHECK}",
        f"https://hc-ping.com/{OTHER}/start",
    ]
    assert client.requests[1].headers["User-Agent"] == "job-b/1.0"


def test_healthchecks_facade_custom_base_url():
    client = StubHttpClient([OK])
    hc = Healthchecks(http_client=client, settings=PingSettings())
    reporter = hc.reporter(CHECK, "https://self-hosted.example/ping")
    assert reporter.url_for("fail") == f"https://self-hosted.example/ping/{CHECK}/fail"
