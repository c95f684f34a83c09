# core/embed_tags.py
from __future__ import annotations

import logging
import os
from typing import Optional

from mutagen.flac import FLAC
from mutagen.id3 import ID3, TCON, TIT2, ID3NoHeaderError
from mutagen.mp4 import MP4
from mutagen.oggopus import OggOpus
from mutagen.oggvorbis import OggVorbis
from mutagen.wave import WAVE

logger = logging.getLogger(__name__)

# Convention:
#   - Song title goes into the format's title field
#   - Style tags from the generator go into genre
VORBIS_TITLE_KEY = "TITLE"
VORBIS_GENRE_KEY = "GENRE"

MP4_TITLE_KEY = "\xa9nam"
MP4_GENRE_KEY = "\xa9gen"


def _norm(s: Optional[str]) -> Optional[str]:
    if not s:
        return None
    s = s.strip()
    return s or None


def embed_item_tags(path: str, title: Optional[str], style: Optional[str]) -> bool:
    """
    Write title/style into a downloaded file depending on its extension:
      - .mp3            -> ID3: TIT2 + TCON
      - .wav            -> ID3 chunk inside RIFF: TIT2 + TCON
      - .flac           -> Vorbis comments: TITLE + GENRE
      - .ogg/.opus      -> Vorbis comments: TITLE + GENRE
      - .m4a            -> MP4: ©nam + ©gen
    Returns False when nothing was written. Errors are logged, not raised:
    a file we cannot tag is still a good download.
    """
    EMBEDDER_MAP = {
        ".mp3": _embed_mp3,
        ".wav": _embed_wave,
        ".flac": _embed_flac,
        ".ogg": _embed_ogg_vorbis,
        ".opus": _embed_ogg_opus,
        ".m4a": _embed_mp4,
    }

    title = _norm(title)
    style = _norm(style)
    if not title and not style:
        return False

    ext = os.path.splitext(path)[1].lower()
    embedder = EMBEDDER_MAP.get(ext)
    if embedder is None:
        return False

    try:
        embedder(path, title, style)
    except Exception as e:
        logger.warning("Could not tag %s: %s", path, e)
        return False
    return True


def _set_id3_frames(tags, title: Optional[str], style: Optional[str]) -> None:
    if title:
        tags.setall("TIT2", [TIT2(encoding=3, text=[title])])
    if style:
        tags.setall("TCON", [TCON(encoding=3, text=[style])])


def _embed_mp3(path: str, title: Optional[str], style: Optional[str]) -> None:
    try:
        tags = ID3(path)
    except ID3NoHeaderError:
        tags = ID3()
    _set_id3_frames(tags, title, style)
    tags.save(path)


def _embed_wave(path: str, title: Optional[str], style: Optional[str]) -> None:
    audio = WAVE(path)
    if audio.tags is None:
        audio.add_tags()
    _set_id3_frames(audio.tags, title, style)
    audio.save()


def _embed_vorbis_comment(audio_cls, path: str, title: Optional[str], style: Optional[str]) -> None:
    audio = audio_cls(path)
    if title:
        audio[VORBIS_TITLE_KEY] = [title]
    if style:
        audio[VORBIS_GENRE_KEY] = [style]
    audio.save()


def _embed_flac(path: str, title: Optional[str], style: Optional[str]) -> None:
    _embed_vorbis_comment(FLAC, path, title, style)


def _embed_ogg_vorbis(path: str, title: Optional[str], style: Optional[str]) -> None:
    _embed_vorbis_comment(OggVorbis, path, title, style)


def _embed_ogg_opus(path: str, title: Optional[str], style: Optional[str]) -> None:
    _embed_vorbis_comment(OggOpus, path, title, style)


def _embed_mp4(path: str, title: Optional[str], style: Optional[str]) -> None:
    audio = MP4(path)
    if title:
        audio[MP4_TITLE_KEY] = [title]
    if style:
        audio[MP4_GENRE_KEY] = [style]
    audio.save()
