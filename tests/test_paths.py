import os
import tempfile
import unittest

from unittest import mock

from rtspprobe import settings
from rtspprobe.paths import RTSP_PATHS, get_paths, load_paths


class PathsTest(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.file_name = tempfile.mkstemp(suffix='.txt')
        with os.fdopen(fd, 'w') as f:
            f.write('# vendor specific paths\n'
                    '/Streaming/Channels/101\n'
                    '\n'
                    'h264Preview_01_main\n'
                    '  /cam/realmonitor?channel=1&subtype=0  \n')

    def tearDown(self) -> None:
        os.remove(self.file_name)

    def test_builtin_table(self):
        self.assertEqual('/1', RTSP_PATHS[0])
        self.assertGreater(len(RTSP_PATHS), 150)
        self.assertEqual(len(RTSP_PATHS), len(set(RTSP_PATHS)))
        for path in RTSP_PATHS:
            self.assertTrue(path.startswith('/'), path)

    def test_load_paths(self):
        self.assertEqual([
            '/Streaming/Channels/101',
            '/h264Preview_01_main',
            '/cam/realmonitor?channel=1&subtype=0',
        ], load_paths(self.file_name))

    def test_get_paths(self):
        with mock.patch.object(settings, 'PATHS_FILE', None):
            self.assertIs(RTSP_PATHS, get_paths())

        with mock.patch.object(settings, 'PATHS_FILE', self.file_name):
            self.assertEqual(3, len(get_paths()))


if __name__ == '__main__':
    unittest.main()
