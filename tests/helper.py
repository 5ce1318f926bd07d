"""
Child process used by the test suite.

Run as: python helper.py <behaviour> [argument]
"""

import os
import signal
import sys
import time
from pathlib import Path


def wait_for_file(path: str) -> None:
    while not Path(path).exists():
        time.sleep(0.05)


def main(argv):
    behaviour = argv[1]
    stdout = sys.stdout.buffer
    stderr = sys.stderr.buffer

    if behaviour == "invalid utf-8 stdout":
        stdout.write(b"\x80")
    elif behaviour == "invalid utf-8 stderr":
        stderr.write(b"\x80")
    elif behaviour == "exit code 42":
        return 42
    elif behaviour == "output foo and exit with 42":
        stdout.write(b"foo\n")
        return 42
    elif behaviour == "write to stderr":
        stderr.write(b"foo\n")
    elif behaviour == "write to stderr and exit with 42":
        stderr.write(b"foo\n")
        return 42
    elif behaviour == "stream chunk then wait for file":
        stdout.write(b"foo\n")
        stdout.flush()
        wait_for_file(argv[2])
    elif behaviour == "stream chunk to stderr then wait for file":
        stderr.write(b"foo\n")
        stderr.flush()
        wait_for_file(argv[2])
    elif behaviour == "reverse":
        data = sys.stdin.buffer.read()
        stdout.write(data[::-1])
    elif behaviour == "echo stdin":
        while True:
            chunk = os.read(0, 65536)
            if not chunk:
                break
            stdout.write(chunk)
            stdout.flush()
    elif behaviour == "wait until stdin is closed":
        sys.stdin.buffer.read()
        stdout.write(b"stdin is closed\n")
    elif behaviour == "print env":
        stdout.write(os.environ.get(argv[2], "<unset>").encode("utf-8"))
    elif behaviour == "is set":
        stdout.write(b"x" if argv[2] in os.environ else b"")
    elif behaviour == "large interleaved output":
        total = int(argv[2])
        block = 4096
        for _ in range(total // block):
            stdout.write(b"o" * block)
            stderr.write(b"e" * block)
    elif behaviour == "kill self":
        stdout.flush()
        os.kill(os.getpid(), signal.SIGKILL)
    else:
        stderr.write(f"helper: invalid behaviour: {behaviour}\n".encode("utf-8"))
        return 2

    stdout.flush()
    stderr.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
