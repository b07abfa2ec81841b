import pytest

from krill import logger
from krill.__main__ import EditorContext
from krill.config import EditorConfig


class FakeTerminal:
    """Terminal stand-in: scripted input bytes, captured output, fixed size."""
    def __init__(self, data=b"", rows=24, cols=80):
        self.input = bytearray(data)
        self.output = bytearray()
        self.writes = 0
        self.rows = rows
        self.cols = cols
        self.idle_reads = 0

    def feed(self, data):
        self.input += data

    def read_byte(self, timeout):
        if not self.input:
            # A loop waiting forever on input is a test bug
            self.idle_reads += 1
            if self.idle_reads > 1000:
                raise EOFError("no more scripted input")
            return None
        self.idle_reads = 0
        byte = self.input[0]
        del self.input[0]
        return byte

    def write(self, data):
        self.output += data
        self.writes += 1

    def get_window_size(self):
        return self.rows, self.cols


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    path = tmp_path / "krill.log"
    monkeypatch.setattr(logger, "LOG_FILE_PATH", str(path))
    return path


@pytest.fixture
def term():
    return FakeTerminal()


@pytest.fixture
def context(term):
    return EditorContext(term, EditorConfig(log_file=""))


@pytest.fixture
def make_context():
    """Factory for an editor context over a document holding `lines`."""
    def make(lines=(), rows=24, cols=80, **config):
        config.setdefault("log_file", "")
        ctx = EditorContext(FakeTerminal(rows=rows, cols=cols), EditorConfig(**config))
        ctx.document.load_lines(list(lines))
        return ctx
    return make
