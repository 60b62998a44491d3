"""
Configuration constants for media hygiene.
"""

# --- File Type Definitions (rename) ---
# Extensions are stored without the leading dot, lower-cased.
IMAGE_EXTS = {'jpg', 'jpeg', 'png', 'heic'}
IMAGE_SIDECAR_EXTS = {'mp4', 'mov', 'aae'}
VIDEO_EXTS = {'mp4', 'mov', 'avi', 'mts'}

RECOGNIZED_EXTS = IMAGE_EXTS | IMAGE_SIDECAR_EXTS | VIDEO_EXTS

# --- File Type Definitions (verify) ---
VERIFY_IMAGE_EXTS = {'jpg', 'jpeg', 'png', 'webp', 'heic'}
VERIFY_VIDEO_EXTS = {'mp4', 'mov', 'mpg', 'avi', 'mkv', 'flv', 'wmv', 'webm', 'mts'}

# --- Metadata Parsing ---
TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S"

# exifread tag names for the original capture time of a photo
ORIGINAL_CAPTURE_TAGS = [
    'EXIF DateTimeOriginal',
]

# pymediainfo "General" track fields holding the creation time of a video.
# Priority: Recorded -> Encoded -> Tagged. File modification dates are not
# embedded metadata and are deliberately absent.
VIDEO_DATE_FIELDS = [
    "recorded_date",
    "encoded_date",
    "tagged_date",
]

EXIFTOOL_IMAGE_TAG = "DateTimeOriginal"
EXIFTOOL_VIDEO_TAG = "CreateDate"

# --- Journals ---
RENAME_LOG = "rename_log.jsonl"
CORRUPT_FILES_LOG = "corrupt_files.jsonl"
BACKSYNC_LOG = "backsync_log.txt"

# --- Checksums ---
CHECKSUM_SUFFIX = ".crc32.txt"
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- External Tools ---
EXIFTOOL = "exiftool"
FFPROBE = "ffprobe"
