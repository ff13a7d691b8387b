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

import logging
import sys

from typing import Callable, List, Optional, Sequence

from tornado import gen
from tornado.ioloop import IOLoop
from tornado.locks import Semaphore

from rtspprobe import settings
from rtspprobe.cmd import Flags, WaitGroup, start_command
from rtspprobe.paths import get_paths
from rtspprobe.utils.rtsp import RtspProber


def parse_options(parser, args):
    parser.add_argument('hosts', nargs='+', metavar='HOST[:PORT]', help='the hosts to probe')
    parser.add_argument('-p', help='read candidate paths from this file instead of the built-in list',
                        type=str, dest='paths_file')
    parser.add_argument('-t', help='connection timeout, in seconds', type=float, dest='connect_timeout')
    parser.add_argument('-x', help='command to run for each stream found ({url} is replaced by the stream URL)',
                        type=str, dest='command')
    parser.add_argument('-T', help='command timeout, in seconds', type=float, dest='command_timeout')
    parser.add_argument('-r', help='command outcomes to report (comma separated: err, warn, info)',
                        type=str, dest='report')

    return parser.parse_args(args)


async def scan(hosts: Sequence[str], paths: Optional[Sequence[str]] = None,
               on_found: Optional[Callable[[str], None]] = None) -> List[str]:
    """Probe all hosts, at most SCAN_CONCURRENCY at a time, returning the URLs found in host order."""

    semaphore = Semaphore(settings.SCAN_CONCURRENCY)

    async def probe(host: str) -> Optional[str]:
        async with semaphore:
            url = await RtspProber(host).check_paths(paths)

        if url and on_found:
            on_found(url)

        return url

    urls = await gen.multi([probe(host) for host in hosts])

    return [url for url in urls if url]


def main(parser, args):
    from rtspprobe import probectl

    options = parse_options(parser, args)

    probectl.configure_logging('scan', options.log_to_file)

    if options.paths_file:
        settings.PATHS_FILE = options.paths_file

    if options.connect_timeout:
        settings.CONNECT_TIMEOUT = options.connect_timeout

    if options.command_timeout:
        settings.COMMAND_TIMEOUT = options.command_timeout

    try:
        flags = Flags.parse(options.report if options.report is not None else settings.COMMAND_FLAGS)
        paths = get_paths()

    except (ValueError, OSError) as e:
        logging.fatal('invalid scan options: %s' % e)
        sys.exit(-1)

    logging.debug('probing %d hosts using %d candidate paths' % (len(options.hosts), len(paths)))

    wait_group = WaitGroup()

    def on_found(url):
        print(url)
        sys.stdout.flush()

        if options.command:
            start_command(options.command.replace('{url}', url), wait_group, settings.COMMAND_TIMEOUT, flags)

    urls = IOLoop.current().run_sync(lambda: scan(options.hosts, paths, on_found))

    wait_group.wait()

    logging.debug('found %d rtsp streams' % len(urls))

    sys.exit(0 if urls else 1)
