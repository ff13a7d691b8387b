
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

import typing


def pretty_error(error: BaseException) -> str:
    msg = str(error) or error.__class__.__name__
    if msg.startswith('[Errno '):
        msg = msg.split(']', 1)[-1].strip()

    if 'timeout' in msg.lower() or 'timed out' in msg.lower():
        msg = 'timed out'

    return msg


def make_str(s: typing.Union[bytes, str, None]) -> str:
    if s is None:
        return ''

    if isinstance(s, str):
        return s

    return s.decode('utf-8', errors='replace')
