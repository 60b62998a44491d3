import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Set

from PIL import Image
from pillow_heif import register_heif_opener

from .. import config
from ..exceptions import MissingToolError

# Lets Pillow decode .heic files
register_heif_opener()


class CorruptionChecker(Protocol):
    """Corruption detection capability consumed by the verifier."""

    def is_corrupt(self, path: Path) -> bool:
        ...


class MediaIntegrityChecker:
    """
    Decides whether a media file is damaged.

    Strategies:
      - Images: Pillow verify() followed by a full decode.
      - Video: 'ffprobe -v error', any error output or non-zero exit counts.
    """

    def __init__(self,
                 video_exts: Set[str] = config.VERIFY_VIDEO_EXTS,
                 ffprobe: str = config.FFPROBE,
                 timeout: Optional[float] = None):
        self.video_exts = video_exts
        self.ffprobe = ffprobe
        self.timeout = timeout

    def ensure_available(self):
        if shutil.which(self.ffprobe) is None:
            raise MissingToolError(f"{self.ffprobe} is not installed. Install ffmpeg and try again.")

    def is_corrupt(self, path: Path) -> bool:
        if path.suffix[1:].lower() in self.video_exts:
            return self._video_is_corrupt(path)
        return self._image_is_corrupt(path)

    def _image_is_corrupt(self, path: Path) -> bool:
        try:
            # verify() leaves the image unusable, so reopen for the full decode
            with Image.open(path) as im:
                im.verify()
            with Image.open(path) as im:
                im.load()
        except Exception as e:
            logging.debug(f"Image decode failed for {path}: {e}")
            return True
        return False

    def _video_is_corrupt(self, path: Path) -> bool:
        cmd = [self.ffprobe, "-v", "error", "-i", str(path)]
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logging.warning(f"{self.ffprobe} timed out on {path}")
            return True
        except OSError as e:
            raise MissingToolError(f"Cannot run {self.ffprobe}: {e}") from e

        if result.returncode != 0 or result.stderr.strip():
            logging.debug(f"{self.ffprobe} reported errors for {path}: {result.stderr.strip()}")
            return True
        return False
