from typing import Dict, List, Optional, Set, Tuple
from unittest import mock

from tornado.iostream import IOStream, StreamClosedError
from tornado.tcpserver import TCPServer
from tornado.testing import AsyncTestCase, bind_unused_port

__all__ = ('AsyncMock', 'FakeRtspServer', 'RtspTestCase')


class AsyncMock(mock.MagicMock):
    def __call__(self, *args, **kwargs):
        sup = super()

        async def coro():
            return sup.__call__(*args, **kwargs)

        return coro()

    def __await__(self):
        return self().__await__()


class FakeRtspServer(TCPServer):
    """Answers each request with the status configured for its path and records what it got."""

    def __init__(self) -> None:
        super().__init__()
        self.statuses = {}  # type: Dict[str, int]
        self.default_status = 404
        self.body = b''
        self.raw_reply = None  # type: Optional[bytes]
        self.raw_replies = {}  # type: Dict[str, bytes]
        self.close_on = set()  # type: Set[str]
        self.silent = False
        self.requests = []  # type: List[Tuple[str, str]]
        self.raw_requests = []  # type: List[bytes]
        self.connections = 0

    async def handle_stream(self, stream: IOStream, address: tuple) -> None:
        self.connections += 1
        try:
            while True:
                data = await stream.read_until(b'\r\n\r\n')
                method, path, _ = data.split(b'\r\n', 1)[0].decode().split(' ')
                self.requests.append((method, path))
                self.raw_requests.append(data)

                if self.silent:
                    continue

                if path in self.raw_replies:
                    await stream.write(self.raw_replies[path])

                elif self.raw_reply is not None:
                    await stream.write(self.raw_reply)

                else:
                    status = self.statuses.get(path, self.default_status)
                    header = ('RTSP/1.0 %d Whatever\r\nCSeq: 0\r\nContent-Length: %d\r\n\r\n' %
                              (status, len(self.body)))
                    await stream.write(header.encode() + self.body)

                if path in self.close_on:
                    stream.close()
                    return

        except StreamClosedError:
            pass

    @property
    def paths(self) -> List[str]:
        return [path for _, path in self.requests]


class RtspTestCase(AsyncTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.server, self.port = self.start_server()
        self.address = '127.0.0.1:%d' % self.port

    def tearDown(self) -> None:
        self.server.stop()
        super().tearDown()

    def start_server(self) -> Tuple[FakeRtspServer, int]:
        sock, port = bind_unused_port()
        server = FakeRtspServer()
        server.add_sockets([sock])

        return server, port
