from dataclasses import dataclass
from typing import Tuple

__all__ = ('RtspUrl', 'split_address')


def split_address(address: str) -> Tuple[str, str]:
    """Split a "host[:port]" string, keeping IPv6 brackets out of the host.

    The port is returned as an empty string when the address has none.
    """

    address = address.strip()
    if address.startswith('['):
        host, _, rest = address[1:].partition(']')
        port = rest[1:] if rest.startswith(':') else ''

    elif address.count(':') == 1:
        host, port = address.split(':')

    else:  # plain host or bare IPv6 address
        host, port = address, ''

    if not host or (port and not port.isdigit()):
        raise ValueError('invalid address "%s"' % address)

    return host, port


@dataclass
class StreamUrl:
    scheme: str
    port: str
    host: str = '127.0.0.1'
    path: str = ''

    _tpl = '%(scheme)s://%(host)s%(port)s%(path)s'

    def __str__(self):
        host = self.host
        if ':' in host:
            host = '[%s]' % host

        return self._tpl % dict(
            scheme=self.scheme,
            host=host,
            port=(':' + str(self.port)) if self.port else '',
            path=self.path,
        )

    @classmethod
    def from_address(cls, address: str, path: str = '') -> __qualname__:
        # an address without a port keeps an empty port, so that str() gives back the address as written
        host, port = split_address(address)
        return cls(host=host, port=port, path=path)

    def with_path(self, path: str) -> __qualname__:
        return type(self)(scheme=self.scheme, host=self.host, port=self.port, path=path)


@dataclass
class RtspUrl(StreamUrl):
    scheme: str = 'rtsp'
    port: str = '554'
