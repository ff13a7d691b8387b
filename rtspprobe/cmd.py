
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

import enum
import logging
import os
import signal
import subprocess
import sys
import threading
import time

from collections import namedtuple
from typing import List, Optional

from rtspprobe import settings
from rtspprobe.utils import make_str


__all__ = ('Flags', 'WaitGroup', 'CommandResult', 'run_command', 'start_command')


CommandResult = namedtuple('CommandResult', ('command', 'returncode', 'stdout', 'stderr', 'timed_out'))


class Flags(enum.IntFlag):
    """Selects which command outcomes get reported."""

    ERR = 1
    WARN = 2
    INFO = 4

    def set(self, flag: 'Flags') -> 'Flags':
        return self | flag

    def clear(self, flag: 'Flags') -> 'Flags':
        return self & ~flag

    def toggle(self, flag: 'Flags') -> 'Flags':
        return self ^ flag

    def has(self, flag: 'Flags') -> bool:
        return bool(self & flag)

    @classmethod
    def parse(cls, text: str) -> 'Flags':
        flags = cls(0)
        for name in text.split(','):
            name = name.strip().upper()
            if not name or name == 'NONE':
                continue

            try:
                flags |= cls[name]

            except KeyError:
                raise ValueError('unknown report flag: %s' % name.lower()) from None

        return flags


class WaitGroup:
    """Counts running commands and lets a caller wait until all of them are done."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, delta: int = 1) -> None:
        with self._cond:
            if self._count + delta < 0:
                raise ValueError('negative wait group counter')

            self._count += delta
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: Optional[float] = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)


def _shell_args(command: str) -> List[str]:
    if sys.platform == 'win32':
        return ['cmd.exe', '/C', command]

    return ['sh', '-c', command]


def _kill(process: subprocess.Popen) -> None:
    try:
        if os.name == 'posix':
            # the shell runs in its own session, take down everything it started
            os.killpg(process.pid, signal.SIGKILL)

        else:
            process.kill()

    except OSError:
        pass  # already gone


def run_command(command: str, wait_group: WaitGroup, timeout: float, flags: Flags) -> CommandResult:
    """Run a shell command, killing it once the timeout elapses.

    The outcome is only reported through log lines, filtered by flags; the
    wait group is released exactly once, whatever happens.
    """

    try:
        return _run(command, timeout, flags)

    finally:
        wait_group.done()


class _PipeReader(threading.Thread):
    """Collects a pipe in the background, so that waiting on the process never waits on the pipe."""

    def __init__(self, pipe) -> None:
        super().__init__(daemon=True)
        self.pipe = pipe
        self.chunks = []  # type: List[bytes]

    def run(self) -> None:
        try:
            for chunk in iter(lambda: self.pipe.read1(65536), b''):
                self.chunks.append(chunk)

        finally:
            self.pipe.close()

    @property
    def data(self) -> bytes:
        return b''.join(self.chunks)


def _run(command: str, timeout: float, flags: Flags) -> CommandResult:
    logging.debug('running command "%s" with a timeout of %ss' % (command, timeout))

    try:
        process = subprocess.Popen(_shell_args(command), stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                   start_new_session=(os.name == 'posix'))

    except OSError as e:
        if flags.has(Flags.ERR):
            logging.error("'%s' failed: %s" % (command, e))

        return CommandResult(command, None, '', '', False)

    deadline = time.monotonic() + timeout
    readers = [_PipeReader(process.stdout), _PipeReader(process.stderr)]
    for reader in readers:
        reader.start()

    try:
        process.wait(timeout=timeout)

    except subprocess.TimeoutExpired:
        _kill(process)
        process.wait()
        if flags.has(Flags.WARN):
            logging.warning("'%s' timed out after %ss" % (command, timeout))

        return CommandResult(command, process.returncode, '', '', True)

    # a background child may keep the pipes open; take what was written until the deadline
    for reader in readers:
        reader.join(max(0, deadline - time.monotonic()))

    stdout = make_str(readers[0].data)
    stderr = make_str(readers[1].data)

    if process.returncode != 0 and flags.has(Flags.ERR):
        logging.error("'%s' failed: exit status %s" % (command, process.returncode))

    if flags.has(Flags.INFO) and stdout:
        sys.stdout.write(stdout)
        sys.stdout.flush()

    if flags.has(Flags.ERR) and stderr:
        logging.error("'%s' stderr: %s" % (command, stderr.rstrip()))

    logging.debug('command "%s" has finished with exit status %s' % (command, process.returncode))

    return CommandResult(command, process.returncode, stdout, stderr, False)


def start_command(command: str, wait_group: WaitGroup, timeout: Optional[float] = None,
                  flags: Optional[Flags] = None) -> threading.Thread:
    if timeout is None:
        timeout = settings.COMMAND_TIMEOUT

    if flags is None:
        flags = Flags.parse(settings.COMMAND_FLAGS)

    wait_group.add(1)
    thread = threading.Thread(target=run_command, args=(command, wait_group, timeout, flags),
                              name='command-%s' % command.split(' ', 1)[0], daemon=True)
    try:
        thread.start()

    except RuntimeError:
        wait_group.done()
        raise

    return thread
