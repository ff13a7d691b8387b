import io
import logging
import shutil
import threading
import time
import unittest

from unittest import mock

from rtspprobe.cmd import Flags, WaitGroup, run_command, start_command


class FlagsTest(unittest.TestCase):
    def test_combinators(self):
        flags = Flags(0).set(Flags.ERR).set(Flags.INFO)

        self.assertTrue(flags.has(Flags.ERR))
        self.assertTrue(flags.has(Flags.INFO))
        self.assertFalse(flags.has(Flags.WARN))

        cleared = flags.clear(Flags.ERR)
        self.assertFalse(cleared.has(Flags.ERR))
        self.assertTrue(flags.has(Flags.ERR))

        toggled = cleared.toggle(Flags.WARN).toggle(Flags.INFO)
        self.assertEqual(Flags.WARN, toggled)

    def test_parse(self):
        self.assertEqual(Flags.ERR | Flags.WARN, Flags.parse('err,warn'))
        self.assertEqual(Flags.INFO, Flags.parse(' Info '))
        self.assertEqual(Flags(0), Flags.parse(''))
        self.assertEqual(Flags(0), Flags.parse('none'))

        with self.assertRaises(ValueError):
            Flags.parse('err,debug')


class WaitGroupTest(unittest.TestCase):
    def test_wait(self):
        wait_group = WaitGroup()
        self.assertTrue(wait_group.wait(timeout=0))

        wait_group.add(2)
        self.assertFalse(wait_group.wait(timeout=0.05))

        threading.Timer(0.05, wait_group.done).start()
        threading.Timer(0.1, wait_group.done).start()
        self.assertTrue(wait_group.wait(timeout=5))
        self.assertEqual(0, wait_group.count)

    def test_negative_counter(self):
        with self.assertRaises(ValueError):
            WaitGroup().done()


class RunCommandTest(unittest.TestCase):
    def setUp(self) -> None:
        self.wait_group = WaitGroup()
        self.wait_group.add(1)

    def run_command(self, command, timeout=5, flags=Flags.ERR | Flags.WARN | Flags.INFO):
        with mock.patch('sys.stdout', new_callable=io.StringIO) as stdout:
            result = run_command(command, self.wait_group, timeout, flags)

        self.assertEqual(0, self.wait_group.count)

        return result, stdout.getvalue()

    def test_info_echoes_stdout(self):
        result, output = self.run_command('echo hello')

        self.assertEqual(0, result.returncode)
        self.assertFalse(result.timed_out)
        self.assertEqual('hello\n', output)

    def test_no_info_no_stdout(self):
        result, output = self.run_command('echo hello', flags=Flags.ERR | Flags.WARN)

        self.assertEqual('hello\n', result.stdout)
        self.assertEqual('', output)

    def test_timeout(self):
        started = time.time()
        with self.assertLogs(level=logging.WARNING) as logs:
            result, output = self.run_command('echo early; sleep 5', timeout=0.3)

        self.assertLess(time.time() - started, 4)
        self.assertTrue(result.timed_out)
        self.assertEqual('', output)
        self.assertEqual(1, len(logs.records))
        self.assertIn("'echo early; sleep 5' timed out", logs.output[0])

    def test_timeout_without_warn(self):
        with mock.patch.object(logging, 'warning') as warning, mock.patch.object(logging, 'error') as error:
            result, output = self.run_command('sleep 5', timeout=0.2, flags=Flags.ERR | Flags.INFO)

        self.assertTrue(result.timed_out)
        warning.assert_not_called()
        error.assert_not_called()

    def test_failure(self):
        with self.assertLogs(level=logging.ERROR) as logs:
            result, output = self.run_command('exit 3')

        self.assertEqual(3, result.returncode)
        self.assertEqual(1, len(logs.records))
        self.assertIn("'exit 3' failed: exit status 3", logs.output[0])

    def test_failure_without_err(self):
        with mock.patch.object(logging, 'error') as error:
            result, output = self.run_command('echo oops >&2; exit 1', flags=Flags.WARN)

        self.assertEqual(1, result.returncode)
        self.assertEqual('oops\n', result.stderr)
        error.assert_not_called()

    def test_stderr_reported(self):
        with self.assertLogs(level=logging.ERROR) as logs:
            result, output = self.run_command('echo oops >&2')

        self.assertEqual(0, result.returncode)
        self.assertEqual(1, len(logs.records))
        self.assertIn("'echo oops >&2' stderr: oops", logs.output[0])

    def test_start_failure(self):
        with mock.patch('subprocess.Popen', side_effect=OSError('no shell')):
            with self.assertLogs(level=logging.ERROR) as logs:
                result, output = self.run_command('echo hello')

        self.assertIsNone(result.returncode)
        self.assertIn("'echo hello' failed: no shell", logs.output[0])

    def test_start_failure_without_err(self):
        with mock.patch('subprocess.Popen', side_effect=OSError('no shell')):
            with mock.patch.object(logging, 'error') as error:
                result, output = self.run_command('echo hello', flags=Flags.WARN | Flags.INFO)

        self.assertIsNone(result.returncode)
        self.assertFalse(result.timed_out)
        self.assertEqual('', output)
        error.assert_not_called()

    @unittest.skipIf(shutil.which('setsid') is None, 'setsid is not available')
    def test_detached_child_keeps_pipes_open(self):
        started = time.time()
        result, output = self.run_command('echo started; setsid sleep 6 &', timeout=1)

        self.assertLess(time.time() - started, 4)
        self.assertEqual(0, result.returncode)
        self.assertFalse(result.timed_out)
        self.assertEqual('started\n', result.stdout)

    def test_released_on_unexpected_error(self):
        with mock.patch('subprocess.Popen', side_effect=ValueError('bad arguments')):
            with self.assertRaises(ValueError):
                run_command('echo hello', self.wait_group, 5, Flags.ERR)

        self.assertEqual(0, self.wait_group.count)


class StartCommandTest(unittest.TestCase):
    def test_concurrent_commands(self):
        wait_group = WaitGroup()

        started = time.time()
        threads = [
            start_command('sleep 0.2', wait_group, 5, Flags(0)),
            start_command('sleep 0.2', wait_group, 5, Flags(0)),
            start_command('sleep 10', wait_group, 0.3, Flags(0)),
        ]

        self.assertTrue(wait_group.wait(timeout=5))
        self.assertLess(time.time() - started, 4)
        for thread in threads:
            thread.join(timeout=1)
            self.assertFalse(thread.is_alive())

    @unittest.skipIf(shutil.which('setsid') is None, 'setsid is not available')
    def test_timeout_with_detached_child(self):
        wait_group = WaitGroup()

        started = time.time()
        start_command('setsid sleep 6 & sleep 10', wait_group, 0.3, Flags.WARN)

        self.assertTrue(wait_group.wait(timeout=3))
        self.assertLess(time.time() - started, 4)


if __name__ == '__main__':
    unittest.main()
