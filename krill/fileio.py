"""
Reading and writing whole files for the Krill text editor.
"""

def read_lines(path: str) -> list:
    """Return the lines of `path` as bytes, without their line endings."""
    with open(path, 'rb') as f:
        return [line.rstrip(b"\r\n") for line in f]

def write_file(path: str, data: bytes) -> int:
    """
    Replace the contents of `path` with `data` and return the number of bytes
    written. Errors propagate as OSError.
    """
    with open(path, 'wb') as f:
        f.write(data)
    return len(data)
