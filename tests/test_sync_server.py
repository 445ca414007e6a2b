import asyncio
import io
import os
import shlex
import sys

import pytest
from fastapi.testclient import TestClient

from sse_events import EventDispatcher, parse_chunk, process_stream
from sse_events.parser import StreamEvent
from sync_server import app
from sync_server import command_stream
from sync_server.command_stream import CommandEventStream, describe_exit, format_event, run_command_events
from sync_server.server import SD_LISTEN_FDS_START, SyncServer, systemd_listen_fd


def python_command(code):
    return shlex.join([sys.executable, "-c", code])


def split_events(body):
    return [chunk + "\n\n" for chunk in body.split("\n\n") if chunk]


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_format_event_matches_client_framing():
    chunk = format_event("stdout", "total 64K")
    assert chunk == "event:stdout\ndata:total 64K\n\n"
    assert parse_chunk(chunk) == StreamEvent("stdout", "total 64K")


@pytest.mark.parametrize("returncode,data", [(0, ""), (1, "exit status 1"), (23, "exit status 23"), (-9, "terminated by signal 9")])
def test_describe_exit(returncode, data):
    assert describe_exit(returncode) == data


def test_run_command_events_orders_each_pipe():
    async def collect():
        code = "import sys\nfor i in range(3): print(f'line {i}', flush=True)\nprint('warn', file=sys.stderr)"
        return [event async for event in run_command_events([sys.executable, "-c", code])]

    events = [parse_chunk(chunk) for chunk in asyncio.run(collect())]
    stdout = [e.data for e in events if e.name == "stdout"]
    assert stdout == ["line 0", "line 1", "line 2"]
    assert [e.data for e in events if e.name == "stderr"] == ["warn"]
    assert events[-1] == StreamEvent("error", "")


def test_run_command_events_reports_start_failure():
    async def collect():
        return [event async for event in run_command_events(["/nonexistent/sync-binary"])]

    events = asyncio.run(collect())
    assert len(events) == 1
    event = parse_chunk(events[0])
    assert event.name == "error"
    assert "sync-binary" in event.data


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["sync_running"] is False


def test_sync_streams_command_output(client, monkeypatch):
    code = "import sys\nprint('hello', flush=True)\nprint('careful', file=sys.stderr)\nsys.exit(3)"
    monkeypatch.setattr("settings.SYNC_COMMAND", python_command(code))

    response = client.get("/v1/sync")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"

    events = [parse_chunk(chunk) for chunk in split_events(response.text)]
    assert StreamEvent("stdout", "hello") in events
    assert StreamEvent("stderr", "careful") in events
    assert events[-1] == StreamEvent("error", "exit status 3")


def test_sync_stream_drives_client_exit_code(client, monkeypatch):
    monkeypatch.setattr("settings.SYNC_COMMAND", python_command("print('done')"))
    body = client.get("/v1/sync").text

    stdout, stderr = io.StringIO(), io.StringIO()
    exit_code = process_stream(split_events(body), EventDispatcher(stdout=stdout, stderr=stderr))
    assert exit_code == 0
    assert stdout.getvalue() == "done\n"
    assert stderr.getvalue() == ""


def test_sync_with_empty_command(client, monkeypatch):
    monkeypatch.setattr("settings.SYNC_COMMAND", "   ")
    response = client.get("/v1/sync")
    assert response.status_code == 500


def test_consumer_closing_early_kills_the_command(monkeypatch):
    started = []
    create_subprocess_exec = asyncio.create_subprocess_exec

    async def recording_exec(*args, **kwargs):
        process = await create_subprocess_exec(*args, **kwargs)
        started.append(process)
        return process

    monkeypatch.setattr(command_stream.asyncio, "create_subprocess_exec", recording_exec)

    async def take_first_event():
        code = "import time\nprint('ready', flush=True)\ntime.sleep(60)"
        events = run_command_events([sys.executable, "-c", code])
        first = await events.__anext__()
        await events.aclose()
        return first

    first = asyncio.run(take_first_event())
    assert parse_chunk(first) == StreamEvent("stdout", "ready")
    assert len(started) == 1
    assert started[0].returncode is not None
    assert started[0].returncode != 0


def test_concurrent_runs_are_serialised():
    code = "import time\nprint('one', flush=True)\ntime.sleep(0.2)\nprint('two', flush=True)"
    argv = [sys.executable, "-c", code]

    async def scenario():
        streamer = CommandEventStream()
        seen = []
        running = []

        async def consume(tag):
            async for event in streamer.stream(argv):
                seen.append((tag, parse_chunk(event)))
                running.append(streamer.running)

        await asyncio.gather(consume("a"), consume("b"))
        return seen, running, streamer.running

    seen, running, running_after = asyncio.run(scenario())

    tags = [tag for tag, _ in seen]
    assert sorted(tags) == ["a"] * 3 + ["b"] * 3
    # One switch between consumers: the second run starts after the first ended
    assert sum(1 for prev, cur in zip(tags, tags[1:]) if prev != cur) == 1
    for tag in ("a", "b"):
        assert [event for t, event in seen if t == tag] == [
            StreamEvent("stdout", "one"),
            StreamEvent("stdout", "two"),
            StreamEvent("error", ""),
        ]
    assert all(running)
    assert running_after is False


def test_overlong_line_is_reported_and_reading_continues(monkeypatch):
    monkeypatch.setattr(command_stream, "LINE_LIMIT", 64)

    async def collect():
        code = "print('x' * 5000, flush=True)\nprint('after', flush=True)"
        return [parse_chunk(event) async for event in run_command_events([sys.executable, "-c", code])]

    events = asyncio.run(collect())
    assert any(e.name == "stderr" and "longer than 64 bytes" in e.data for e in events)
    assert StreamEvent("stdout", "after") in events
    assert events[-1] == StreamEvent("error", "")


def test_systemd_fd_used_when_pid_matches(monkeypatch):
    monkeypatch.setenv("LISTEN_PID", str(os.getpid()))
    monkeypatch.setenv("LISTEN_FDS", "1")
    assert systemd_listen_fd() == SD_LISTEN_FDS_START
    assert SyncServer().build_config().fd == SD_LISTEN_FDS_START


@pytest.mark.parametrize(
    "listen_pid,listen_fds",
    [
        ("0", "1"),
        (None, "1"),
        ("self", "0"),
        ("not-a-pid", "1"),
        ("self", "many"),
    ],
)
def test_systemd_fd_ignored(monkeypatch, listen_pid, listen_fds):
    monkeypatch.delenv("LISTEN_PID", raising=False)
    if listen_pid is not None:
        monkeypatch.setenv("LISTEN_PID", str(os.getpid()) if listen_pid == "self" else listen_pid)
    monkeypatch.setenv("LISTEN_FDS", listen_fds)
    assert systemd_listen_fd() is None


def test_server_binds_host_and_port_without_socket_activation(monkeypatch):
    monkeypatch.delenv("LISTEN_PID", raising=False)
    monkeypatch.delenv("LISTEN_FDS", raising=False)
    config = SyncServer(bind_address="127.0.0.1", port=9099).build_config()
    assert config.fd is None
    assert config.host == "127.0.0.1"
    assert config.port == 9099
