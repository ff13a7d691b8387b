import logging
import os.path

config_file = None

# path to the directory where log files go
for d in ['/log', '/var/log', '/tmp', '/var/tmp']:
    if os.path.exists(d):
        LOG_PATH = d
        break

else:
    LOG_PATH = os.path.dirname(os.path.abspath(__file__))

# the log level (use FATAL, ERROR, WARNING, INFO or DEBUG)
LOG_LEVEL = logging.INFO

# the RTSP port to use when a host is given without one
DEFAULT_PORT = 554

# timeout in seconds to wait for the TCP connection to a host
CONNECT_TIMEOUT = 2.0

# timeout in seconds to wait for the reply to a single RTSP request
REQUEST_TIMEOUT = 5.0

# the maximum length of an RTSP status line
MAX_LINE_BYTES = 1024

# the maximum length of the header block following the status line
MAX_HEADER_BYTES = 16384

# the largest reply body drained between two requests
MAX_BODY_BYTES = 65536

# the User-Agent header sent with each request
USER_AGENT = 'LibVLC/3.0.0'

# a file with one candidate path per line, replacing the built-in list
PATHS_FILE = None

# the maximum number of hosts probed at the same time
SCAN_CONCURRENCY = 32

# timeout in seconds for commands run on discovered streams
COMMAND_TIMEOUT = 30.0

# which command outcomes are reported (comma separated: err, warn, info)
COMMAND_FLAGS = 'err,warn'
