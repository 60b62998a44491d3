import re
from pathlib import Path
from typing import Optional, Set


def resolve_collision(directory: Path,
                      base_name: str,
                      suffix: str,
                      claimed: Optional[Set[Path]] = None,
                      vacated: Optional[Set[Path]] = None) -> str:
    """
    Returns a filename in `directory` that does not exist yet.

    Tries `base_name + suffix` first, then `base_name_1 + suffix`,
    `base_name_2 + suffix`, ... until a free name is found.
    `suffix` includes the leading dot. No sanitization is done on `base_name`.

    Paths in `claimed` count as taken even if they are not on disk, and
    paths in `vacated` count as free even if they are (dry runs never
    create their targets nor move their sources).
    """
    claimed = claimed or set()
    vacated = vacated or set()

    def taken(path: Path) -> bool:
        if path in claimed:
            return True
        return path.exists() and path not in vacated

    candidate = f"{base_name}{suffix}"
    counter = 1
    while taken(directory / candidate):
        candidate = f"{base_name}_{counter}{suffix}"
        counter += 1
    return candidate


def is_canonical(base_name: str, capture_time: str) -> bool:
    """True if `base_name` is `capture_time` or `capture_time_<n>`."""
    if base_name == capture_time:
        return True
    return re.fullmatch(re.escape(capture_time) + r'_\d+', base_name) is not None
