import json
import shutil
import threading
import time
import uuid
from pathlib import Path

import numpy as np
import pytest
import zmq

from engine.cache import PatternCache
from engine.generator import PatternGenerator
from zmq_server import PatternServer


def _wait_for_server(srv: PatternServer, timeout: float = 2.0) -> bool:
    """Ping the server until it responds or timeout expires."""
    ctx = zmq.Context()
    sock = ctx.socket(zmq.REQ)
    sock.setsockopt(zmq.LINGER, 0)
    sock.setsockopt(zmq.RCVTIMEO, 500)
    sock.connect(f"tcp://127.0.0.1:{srv.port}")
    deadline = time.monotonic() + timeout
    alive = False
    while time.monotonic() < deadline:
        try:
            sock.send_json({"cmd": "ping", "id": "health", "_token": srv.token})
            resp = sock.recv_json()
            if resp.get("status") == "alive":
                alive = True
                break
        except zmq.Again:
            time.sleep(0.05)
    sock.close()
    ctx.term()
    return alive


@pytest.fixture
def random_identities():
    """Factory for n pseudo-random (creator, title, year) triples, stable across runs."""

    def make(n: int, seed: int = 1234):
        rng = np.random.default_rng(seed)
        letters = rng.integers(ord("a"), ord("z") + 1, size=(n, 2, 10))
        years = rng.integers(1980, 2010, size=n)
        return [
            (
                "".join(map(chr, letters[i, 0])),
                "".join(map(chr, letters[i, 1])),
                str(years[i]),
            )
            for i in range(n)
        ]

    return make


@pytest.fixture
def cache():
    return PatternCache(capacity=100)


@pytest.fixture
def generator(cache):
    """Fresh generator with its own cache (never the process default)."""
    return PatternGenerator(cache)


@pytest.fixture(scope="session")
def _zmq_server_session():
    """Start ONE ZMQ server per session with a private generator."""
    srv = PatternServer(PatternGenerator(PatternCache()))
    thread = threading.Thread(target=srv.run, daemon=True)
    thread.start()
    if not _wait_for_server(srv):
        pytest.skip("ZMQ server failed to start within 2s")
    yield srv
    srv.running = False
    # Wait for poller timeout cycle to complete
    time.sleep(0.6)


@pytest.fixture
def zmq_server(_zmq_server_session):
    """Function-scoped wrapper: resets state between tests, shares session server."""
    _zmq_server_session.reset_state()
    _zmq_server_session.running = True
    yield _zmq_server_session


@pytest.fixture
def zmq_server_disposable():
    """Disposable server for shutdown tests that destroy sockets/context."""
    srv = PatternServer(PatternGenerator(PatternCache()))
    thread = threading.Thread(target=srv.run, daemon=True)
    thread.start()
    if not _wait_for_server(srv):
        pytest.skip("ZMQ server failed to start within 2s")
    yield srv
    srv.running = False
    time.sleep(0.6)


class AuthenticatedZmqClient:
    """Wraps a ZMQ REQ socket and auto-injects the auth token."""

    def __init__(self, sock: zmq.Socket, token: str):
        self._sock = sock
        self._token = token

    def send_json(self, msg: dict) -> None:
        msg["_token"] = self._token
        self._sock.send_json(msg)

    def recv_json(self) -> dict:
        return self._sock.recv_json()

    def request(self, msg: dict) -> dict:
        self.send_json(msg)
        return self.recv_json()

    def close(self) -> None:
        self._sock.close()


@pytest.fixture
def zmq_client(zmq_server):
    """REQ socket connected to the test server (auto-injects auth token)."""
    ctx = zmq.Context()
    sock = ctx.socket(zmq.REQ)
    sock.setsockopt(zmq.RCVTIMEO, 10_000)
    sock.connect(f"tcp://127.0.0.1:{zmq_server.port}")
    client = AuthenticatedZmqClient(sock, zmq_server.token)
    yield client
    sock.close(linger=0)
    ctx.term()


@pytest.fixture
def zmq_ping_client(zmq_server):
    """REQ socket connected to the test server's ping port."""
    ctx = zmq.Context()
    sock = ctx.socket(zmq.REQ)
    sock.setsockopt(zmq.RCVTIMEO, 5_000)
    sock.connect(f"tcp://127.0.0.1:{zmq_server.ping_port}")
    client = AuthenticatedZmqClient(sock, zmq_server.token)
    yield client
    sock.close(linger=0)
    ctx.term()


SAMPLE_TAPES = [
    {
        "id": "dj-dan-housing-project",
        "title": "Housing Project",
        "released": "1992",
        "djs": [{"name": "DJ Dan"}],
        "images": {"cover": "/media/site/blank-tape.svg"},
        "sides": [{"image": None}, {"image": ""}],
    },
    {
        "id": "has-cover",
        "title": "Covered",
        "released": "1995",
        "djs": [{"name": "Somebody"}],
        "images": {"cover": "/media/covers/covered.jpg"},
        "sides": [],
    },
    {
        "id": "has-side",
        "title": "Sided",
        "released": 1996,
        "djs": [{"name": "Somebody Else"}],
        "images": {},
        "sides": [{"image": "/media/sides/a.jpg"}],
    },
    {
        "id": "no-dj-no-year",
        "title": "Mystery Mix",
        "djs": [],
    },
]


@pytest.fixture
def sample_tapes():
    return [dict(t) for t in SAMPLE_TAPES]


@pytest.fixture
def home_tmp_path():
    """tmp_path equivalent under ~/ for tests that go through validate_output_dir.

    macOS tmp_path lives under /private/var, which the output gate blocks.
    """
    base = Path.home() / ".cache" / "tapelabel" / "test-tmp"
    base.mkdir(parents=True, exist_ok=True)
    d = base / f"test_{uuid.uuid4().hex[:8]}"
    d.mkdir()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def tapes_file(tmp_path, sample_tapes):
    path = tmp_path / "tapes.json"
    path.write_text(json.dumps(sample_tapes), encoding="utf-8")
    return path
