import socketserver
import threading
import time

import pytest

from verification.client import CheckHimClient
from verification.errors import DeadlineExceededError
from verification.options import ClientConfig

BODY = b'{"carrier":"X","valid":true}'


class _SlowHandler(socketserver.BaseRequestHandler):
    def handle(self):
        self.request.recv(65536)
        time.sleep(self.server.head_delay)
        head = b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: %d\r\n\r\n" % len(BODY)
        try:
            self.request.sendall(head)
            if not self.server.byte_delay:
                self.request.sendall(BODY)
                return
            for b in BODY:
                self.request.sendall(bytes([b]))
                time.sleep(self.server.byte_delay)
        except OSError:
            # client gave up and closed the socket
            pass


@pytest.fixture
def slow_server():
    servers = []

    def start(head_delay=0.0, byte_delay=0.0):
        srv = socketserver.ThreadingTCPServer(("127.0.0.1", 0), _SlowHandler)
        srv.daemon_threads = True
        srv.head_delay = head_delay
        srv.byte_delay = byte_delay
        threading.Thread(target=srv.serve_forever, daemon=True).start()
        servers.append(srv)
        return f"http://127.0.0.1:{srv.server_address[1]}"

    yield start
    for srv in servers:
        srv.shutdown()
        srv.server_close()


def test_trickled_body_hits_total_deadline(slow_server):
    base = slow_server(byte_delay=0.03)
    with CheckHimClient("k", ClientConfig(base_url=base)) as client:
        t0 = time.monotonic()
        with pytest.raises(DeadlineExceededError):
            client.verify("+1234567890", timeout=0.1)
        elapsed = time.monotonic() - t0

    assert elapsed < 0.5


def test_stalled_headers_hit_deadline(slow_server):
    base = slow_server(head_delay=0.5)
    with CheckHimClient("k", ClientConfig(base_url=base)) as client:
        t0 = time.monotonic()
        with pytest.raises(DeadlineExceededError):
            client.verify("+1234567890", timeout=0.1)
        elapsed = time.monotonic() - t0

    assert elapsed < 0.45


def test_fast_server_within_deadline(slow_server):
    base = slow_server()
    with CheckHimClient("k", ClientConfig(base_url=base)) as client:
        result = client.verify("+1234567890", timeout=2.0)

    assert result.valid is True
    assert result.carrier == "X"
