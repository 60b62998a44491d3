import zlib
from pathlib import Path
from typing import Optional

from .. import config


def compute_crc32(path: Path) -> str:
    """CRC32 of the file contents as 8 lower-case hex digits."""
    crc = 0
    with open(path, 'rb') as f:
        while chunk := f.read(config.HASH_CHUNK_SIZE):
            crc = zlib.crc32(chunk, crc)
    return f"{crc & 0xFFFFFFFF:08x}"


def checksum_path(path: Path) -> Path:
    return path.with_name(path.name + config.CHECKSUM_SUFFIX)


def read_checksum(path: Path) -> Optional[str]:
    """Stored checksum for `path`, or None if it has no checksum sidecar."""
    sidecar = checksum_path(path)
    if not sidecar.is_file():
        return None
    # Handle potential line endings
    return sidecar.read_text(encoding="utf-8").strip("\r\n ")


def write_checksum(path: Path, value: str) -> Path:
    sidecar = checksum_path(path)
    sidecar.write_text(value + "\n", encoding="utf-8")
    return sidecar
