import asyncio
import contextlib
import re
import socket
import threading

import pytest
from werkzeug.serving import make_server

from demo_lab.app import create_app

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI.sub("", text)


def free_port() -> int:
    """A port on 127.0.0.1 that nothing listens on (connections get refused)."""
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@contextlib.asynccontextmanager
async def tcp_listener(handler):
    server = await asyncio.start_server(handler, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()


async def _finish(reader, writer):
    # wait for the client to hang up, then close our side
    with contextlib.suppress(OSError):
        await reader.read()
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()


async def hello_handler(reader, writer):
    writer.write(b"HELLO\r\nsecond line\r\n")
    await writer.drain()
    await _finish(reader, writer)


async def silent_handler(reader, writer):
    await _finish(reader, writer)


async def hangup_handler(reader, writer):
    await reader.read(1024)
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()


@contextlib.contextmanager
def serve_app(app):
    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        thread.join(timeout=5)


@pytest.fixture(scope="module")
def demo_lab_url():
    with serve_app(create_app()) as url:
        yield url


@pytest.fixture(scope="module")
def bare_lab_url():
    with serve_app(create_app(robots=False, security_headers=False)) as url:
        yield url
