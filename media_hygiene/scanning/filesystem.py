import os
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .. import config
from ..models import FileGroup, MediaFile


def iter_files(root: Path, extensions: Optional[Set[str]] = None) -> Iterator[Path]:
    """
    Depth-first walker using os.scandir for speed.

    Yields files in a stable order (files of a directory before its
    subdirectories, both sorted by name). When `extensions` is given only
    files whose lower-cased extension (no dot) is in the set are yielded.
    """
    stack = [root]
    while stack:
        current = stack.pop()

        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logging.warning(f"Cannot read directory {current}: {e}")
            continue

        # Sort for stable traversal order
        entries.sort(key=lambda e: e.name)

        dirs = []
        files = []
        for e in entries:
            try:
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    files.append(Path(e.path))
            except OSError as err:
                logging.warning(f"Skipping unreadable entry {e.path}: {err}")

        # Push dirs to stack (reversed so we process A before Z)
        for d in reversed(dirs):
            stack.append(d)

        for f in files:
            if f.name.startswith("._"):
                continue
            if extensions is not None and f.suffix[1:].lower() not in extensions:
                continue
            yield f


class MediaScanner:
    """
    Groups media files by (directory, base name) and assigns roles.

    Base names are compared case-insensitively, so IMG_0001.HEIC and
    img_0001.aae end up in the same group.
    """

    def __init__(self,
                 image_exts: Set[str] = config.IMAGE_EXTS,
                 image_sidecar_exts: Set[str] = config.IMAGE_SIDECAR_EXTS,
                 video_exts: Set[str] = config.VIDEO_EXTS):
        self.image_exts = set(image_exts)
        self.image_sidecar_exts = set(image_sidecar_exts)
        self.video_exts = set(video_exts)
        self.recognized = self.image_exts | self.image_sidecar_exts | self.video_exts

    def scan(self, root: Path) -> List[FileGroup]:
        """Returns the groups under root in sorted path order."""
        buckets: Dict[Tuple[Path, str], List[MediaFile]] = {}

        for path in iter_files(root, self.recognized):
            media = MediaFile.from_path(path, self._classify(path.suffix[1:].lower()))
            key = (media.directory, media.base_name.lower())
            buckets.setdefault(key, []).append(media)

        groups = [self._build_group(members) for members in buckets.values()]
        groups.sort(key=lambda g: min(str(m.path) for m in g.files))

        logging.info(f"Scan complete. Found {len(groups)} groups under {root}.")
        return groups

    def _classify(self, ext: str) -> str:
        if ext in self.image_exts:
            return 'image'
        if ext in self.video_exts:
            return 'video'
        return 'sidecar'

    def _build_group(self, members: List[MediaFile]) -> FileGroup:
        members = sorted(members, key=lambda m: m.path.name)
        first = members[0]
        group = FileGroup(directory=first.directory, base_name=first.base_name)

        images = [m for m in members if m.kind == 'image']
        videos = [m for m in members if m.kind == 'video']

        if images:
            # A same-named video is a sidecar of the image (live photos etc.)
            primary = images[0]
        elif videos:
            primary = videos[0]
        else:
            primary = None

        for m in members:
            if m is primary:
                m.role = 'primary'
                group.primary = m
                group.base_name = m.base_name
            elif primary is None:
                m.role = 'unmatched'
                group.unmatched.append(m)
            elif primary.kind == 'video' and m.kind == 'sidecar':
                # Image sidecars (.aae) do not follow a video
                m.role = 'unmatched'
                group.unmatched.append(m)
            else:
                m.role = 'sidecar'
                group.sidecars.append(m)

        return group
