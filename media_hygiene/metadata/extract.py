import logging
import shutil
import subprocess
import json
from pathlib import Path
from datetime import datetime
from typing import Optional, Protocol

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MissingToolError


class MetadataReader(Protocol):
    """Capture-time capability consumed by the rename engine."""

    def get_original_capture_time(self, path: Path) -> Optional[str]:
        ...

    def get_creation_time(self, path: Path) -> Optional[str]:
        ...


class MetadataExtractor:
    """
    Reads capture times from embedded metadata.

    Strategies:
      - Images: 'exifread' (fast, Python-native) -> falls back to 'exiftool'.
      - Video: 'pymediainfo' (fast wrapper) -> falls back to 'exiftool'.

    Timestamps are returned formatted as config.TIMESTAMP_FORMAT, or None
    when the field is absent or the file cannot be read.
    """

    def __init__(self, exiftool: str = config.EXIFTOOL):
        self.exiftool = exiftool

    def ensure_available(self):
        """
        Raises MissingToolError when no video metadata backend can run.
        Images are always readable through exifread.
        """
        if self._exiftool_available():
            return
        try:
            if MediaInfo.can_parse():
                return
        except Exception as e:
            logging.debug(f"MediaInfo probe failed: {e}")
        raise MissingToolError(
            f"Neither libmediainfo nor {self.exiftool} is installed. Install one and try again."
        )

    def get_original_capture_time(self, path: Path) -> Optional[str]:
        """Photo 'DateTimeOriginal', formatted."""
        dt = None
        try:
            with path.open('rb') as f:
                # details=False speeds up processing significantly
                tags = exifread.process_file(f, details=False)
            dt = self._parse_exif_date(tags)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")

        if dt is None and self._exiftool_available():
            dt = self._extract_exiftool(path, config.EXIFTOOL_IMAGE_TAG)

        return self._format(dt)

    def get_creation_time(self, path: Path) -> Optional[str]:
        """Video 'CreateDate' (MediaInfo recorded/encoded date), formatted."""
        dt = None
        try:
            dt = self._extract_mediainfo(path)
        except Exception as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")

        if dt is None and self._exiftool_available():
            dt = self._extract_exiftool(path, config.EXIFTOOL_VIDEO_TAG)

        return self._format(dt)

    # --- Internal Extraction Helpers ---

    def _exiftool_available(self) -> bool:
        return shutil.which(self.exiftool) is not None

    def _extract_mediainfo(self, path: Path) -> Optional[datetime]:
        """Parses video using pymediainfo."""
        mi = MediaInfo.parse(str(path))

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.VIDEO_DATE_FIELDS:
                val = getattr(track, field, None)
                if val:
                    dt = self._parse_flexible_date(str(val))
                    if dt:
                        return dt
        return None

    def _extract_exiftool(self, path: Path, tag: str) -> Optional[datetime]:
        """
        Wraps the 'exiftool' command line utility for a single date tag.
        Must be installed and on the system PATH.
        """
        # -j = JSON output
        cmd = [self.exiftool, "-j", f"-{tag}", str(path)]

        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True)
            data_list = json.loads(out)
        except (subprocess.CalledProcessError, OSError, ValueError) as e:
            logging.debug(f"ExifTool failed for {path}: {e}")
            return None

        if not data_list:
            return None

        value = data_list[0].get(tag)
        if not value:
            return None
        return self._parse_flexible_date(str(value))

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        """Helper to parse standard EXIF date strings from exifread."""
        for tag in config.ORIGINAL_CAPTURE_TAGS:
            if tag in tags:
                try:
                    # EXIF format is usually "YYYY:MM:DD HH:MM:SS"
                    dt_str = str(tags[tag]).strip().replace(':', '-', 2)
                    return datetime.strptime(dt_str, "%Y-%m-%d %H:%M:%S")
                except ValueError:
                    continue
        return None

    def _parse_flexible_date(self, dt_str: str) -> Optional[datetime]:
        """
        Handles various date formats (ISO, UTC suffixes, Exiftool quirks).
        Returns a naive datetime object.
        """
        if not dt_str:
            return None

        # Clean up common suffixes/prefixes
        clean = dt_str.replace("UTC", "").strip()
        if clean.endswith("Z"):
            clean = clean[:-1]

        # 1. Try ISO format (e.g. 2020-01-01T12:00:00)
        try:
            return datetime.fromisoformat(clean).replace(tzinfo=None)
        except ValueError:
            pass

        # 2. Try Standard EXIF style "YYYY:MM:DD HH:MM:SS" (zeroed dates fail here)
        try:
            clean_exif = clean.replace(":", "-", 2)
            # Handle potential sub-second precision which strptime hates
            if "." in clean_exif:
                clean_exif = clean_exif.split(".")[0]
            # Drop a trailing timezone offset such as "+02:00"
            clean_exif = clean_exif[:19]
            return datetime.strptime(clean_exif, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            pass

        return None

    def _format(self, dt: Optional[datetime]) -> Optional[str]:
        if dt is None:
            return None
        return dt.strftime(config.TIMESTAMP_FORMAT)
