import os
import re
import unicodedata
from urllib.parse import urlparse

AUDIO_EXTS = {".mp3", ".m4a", ".flac", ".ogg", ".opus", ".wav"}
DEFAULT_AUDIO_EXT = ".wav"
PLACEHOLDER_TITLE = "Untitled"
PART_SUFFIX = ".part"


def collapse(s: str) -> str:
    """
    Combine runs of whitespace into a single space and trim both ends.
    """
    return re.sub(r'\s+', ' ', s).strip()


def safe_filename(title: str | None) -> str:
    # Strip characters that are invalid on any of the usual filesystems.
    name = unicodedata.normalize('NFC', title or "")
    name = re.sub(r'[<>:"/\\|?*\x00-\x1f]', " ", name)
    name = collapse(name).strip(". ")
    return name or PLACEHOLDER_TITLE


def audio_extension(url: str | None) -> str:
    path = urlparse(url or "").path
    ext = os.path.splitext(path)[1].lower()
    return ext if ext in AUDIO_EXTS else DEFAULT_AUDIO_EXT


def reserve_path(directory: str, stem: str, ext: str, part_suffix: str = PART_SUFFIX) -> str:
    """
    Claim `directory/stem+ext`, or `stem (1)+ext`, `stem (2)+ext`, ...
    A name is taken when the file or its `part_suffix` sibling exists. The
    sibling is created exclusively, so two downloads running at the same time
    never get the same name. The caller owns the returned path's part file.
    """
    n = 0
    while True:
        name = stem + ext if n == 0 else f"{stem} ({n}){ext}"
        candidate = os.path.join(directory, name)
        n += 1
        if os.path.exists(candidate):
            continue
        try:
            with open(candidate + part_suffix, "xb"):
                pass
        except FileExistsError:
            continue
        return candidate
