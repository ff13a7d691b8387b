
# Copyright (c) 2025 rtspprobe contributors
# This file is part of rtspprobe.
#
# rtspprobe is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import datetime
import enum
import logging

from typing import Optional, Sequence

from tornado import gen
from tornado.concurrent import Future, future_set_result_unless_cancelled
from tornado.ioloop import IOLoop
from tornado.iostream import IOStream, StreamClosedError, UnsatisfiableReadError
from tornado.tcpclient import TCPClient

from rtspprobe import settings
from rtspprobe.paths import get_paths
from rtspprobe.utils import pretty_error
from rtspprobe.utils.http import RtspUrl


__all__ = ('RtspSession', 'RtspProber', 'ProbeOutcome', 'RtspError', 'TransportError', 'ProtocolError',
           'Rejected', 'Exhausted', 'discover')


_REQUEST_TPL = (
    '%(method)s %(path)s RTSP/1.0\r\n'
    'CSeq: %(cseq)d\r\n'
    'User-Agent: %(user_agent)s\r\n'
    'Accept: application/sdp\r\n'
    '\r\n'
)

_STATUS_OK = 200
_STATUS_UNAUTHORIZED = 401


class ProbeOutcome(enum.Enum):
    FOUND = 'found'
    NOT_FOUND = 'not found'
    UNREACHABLE = 'unreachable'
    UNAUTHORIZED = 'unauthorized'
    BAD_RESPONSE = 'bad response'


class RtspError(Exception):
    outcome = None


class TransportError(RtspError):
    outcome = ProbeOutcome.UNREACHABLE


class ProtocolError(RtspError):
    outcome = ProbeOutcome.BAD_RESPONSE


class Rejected(RtspError):
    outcome = ProbeOutcome.UNAUTHORIZED


class Exhausted(RtspError):
    outcome = ProbeOutcome.NOT_FOUND


def parse_status_line(line: bytes) -> int:
    """Return the status code of an RTSP status line such as "RTSP/1.0 200 OK"."""

    fields = line.decode('latin-1').split()
    if len(fields) > 2 and fields[0].startswith('RTSP'):
        try:
            return int(fields[1], 10)

        except ValueError:
            pass

    raise ProtocolError('bad response')


class RtspSession:
    """A single TCP connection to an RTSP server, used for one request at a time."""

    def __init__(self, address: str) -> None:
        self.address = address
        self.stream = None  # type: Optional[IOStream]
        self.url = None  # type: Optional[RtspUrl]

        # TODO: CSeq is never incremented, so every request carries the same value;
        # confirm whether strict servers reject repeated sequence numbers before changing it
        self.cseq = 0

    def url_for(self, path: str) -> str:
        url = self.url or RtspUrl.from_address(self.address)

        return str(url.with_path(path))

    async def connect(self) -> None:
        try:
            url = RtspUrl.from_address(self.address)

        except ValueError as e:
            raise TransportError(str(e)) from e

        self.url = url
        port = int(url.port or settings.DEFAULT_PORT)

        logging.debug('connecting to rtsp server at %s:%s' % (url.host, port))

        try:
            self.stream = await TCPClient().connect(url.host, port, timeout=settings.CONNECT_TIMEOUT)

        except (gen.TimeoutError, StreamClosedError, OSError) as e:
            raise TransportError('failed to connect to %s: %s' % (self.address, pretty_error(e))) from e

    def build_request(self, path: str) -> str:
        return _REQUEST_TPL % {
            'method': 'OPTIONS' if path == '*' else 'DESCRIBE',
            'path': path,
            'cseq': self.cseq,
            'user_agent': settings.USER_AGENT,
        }

    async def send_request(self, request: str) -> int:
        if self.stream is None:
            raise TransportError('not connected')

        try:
            await self.stream.write(request.encode('utf-8'))
            return await gen.with_timeout(datetime.timedelta(seconds=settings.REQUEST_TIMEOUT),
                                          self._read_reply(), quiet_exceptions=(StreamClosedError,))

        except UnsatisfiableReadError as e:
            raise ProtocolError('bad response') from e

        except StreamClosedError as e:
            # an overlong line makes tornado close the stream, keeping the read error aside
            if isinstance(e.real_error, UnsatisfiableReadError):
                raise ProtocolError('bad response') from e

            raise TransportError('rtsp request to %s failed: %s' % (self.address, pretty_error(e))) from e

        except (gen.TimeoutError, OSError) as e:
            raise TransportError('rtsp request to %s failed: %s' % (self.address, pretty_error(e))) from e

    async def request(self, path: str) -> int:
        code = await self.send_request(self.build_request(path))
        logging.debug('rtsp server at %s answered %s to %s' % (self.address, code, path))

        return code

    async def _read_reply(self) -> int:
        line = await self.stream.read_until(b'\n', max_bytes=settings.MAX_LINE_BYTES)
        code = parse_status_line(line)

        # these codes end the exchange, nothing else will be read from the stream
        if code in (_STATUS_OK, _STATUS_UNAUTHORIZED):
            return code

        # drain the headers and the body, so that the next reply starts on a clean stream
        content_length = 0
        header_bytes = 0
        while True:
            line = await self.stream.read_until(b'\n', max_bytes=settings.MAX_LINE_BYTES)
            header_bytes += len(line)
            if header_bytes > settings.MAX_HEADER_BYTES:
                raise ProtocolError('rtsp headers too long')

            line = line.strip()
            if not line:
                break

            name, _, value = line.partition(b':')
            if name.strip().lower() == b'content-length':
                try:
                    content_length = int(value.strip())

                except ValueError:
                    raise ProtocolError('bad content length: %r' % value)

        if content_length > settings.MAX_BODY_BYTES:
            raise ProtocolError('rtsp body too long: %d bytes' % content_length)

        if content_length > 0:
            await self.stream.read_bytes(content_length)

        return code

    def close(self) -> None:
        if self.stream is None:
            return

        self.stream.close()
        self.stream = None


class RtspProber:
    """Looks for a working stream path on one RTSP server.

    The probe sends OPTIONS *, then DESCRIBE / and then DESCRIBE for each
    candidate path, in order, over a single connection. The first path
    answered with 200 is the result. A 401 anywhere ends the probe, since
    no credentials are ever sent.
    """

    def __init__(self, address: str) -> None:
        self.address = address
        self.session = RtspSession(address)
        self.outcome = None  # type: Optional[ProbeOutcome]

    def check_paths(self, paths: Optional[Sequence[str]] = None) -> 'Future[Optional[str]]':
        future = Future()
        IOLoop.current().spawn_callback(self._check, paths, future)

        return future

    async def _check(self, paths: Optional[Sequence[str]], future: Future) -> None:
        url = None
        try:
            url = await self._probe(paths)
            self.outcome = ProbeOutcome.FOUND
            logging.debug('found rtsp stream at %s' % url)

        except RtspError as e:
            self.outcome = e.outcome
            logging.debug('no rtsp stream at %s (%s): %s' % (self.address, e.outcome.value, e))

        except Exception as e:
            self.outcome = ProbeOutcome.UNREACHABLE
            logging.error('rtsp probe of %s failed: %s' % (self.address, e), exc_info=True)

        finally:
            self.session.close()
            future_set_result_unless_cancelled(future, url)

    async def _probe(self, paths: Optional[Sequence[str]]) -> str:
        if paths is None:
            paths = get_paths()

        await self.session.connect()

        # any answer to OPTIONS will do, it only tells that an rtsp server is listening
        await self.session.request('*')

        code = await self.session.request('/')
        if code == _STATUS_UNAUTHORIZED:
            raise Rejected('authentication required for /')

        if code == _STATUS_OK:
            return self.session.url_for('/')

        for path in paths:
            code = await self.session.request(path)
            if code == _STATUS_UNAUTHORIZED:
                raise Rejected('authentication required for %s' % path)

            if code == _STATUS_OK:
                return self.session.url_for(path)

        raise Exhausted('none of the %d candidate paths answered with 200' % len(paths))


def discover(address: str, paths: Optional[Sequence[str]] = None) -> 'Future[Optional[str]]':
    return RtspProber(address).check_paths(paths)
