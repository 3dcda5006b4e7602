from collections.abc import Iterable, Iterator
import codecs
import os
from pathlib import Path
import stat

from loguru import logger

from genrepass.config import config


# Never worth reading as text, even when asked for by extension.
# fmt: off
BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {
        # documents
        "pdf", "epub", "mobi", "azw", "azw3", "djvu", "doc", "docx", "odt",
        "xls", "xlsx", "ods", "ppt", "pptx", "odp",
        # images
        "png", "jpg", "jpeg", "gif", "bmp", "webp", "ico", "tif", "tiff",
        "psd", "heic", "avif", "raw", "xcf",
        # audio
        "mp3", "wav", "flac", "ogg", "oga", "opus", "m4a", "aac", "wma", "mid",
        # video
        "mp4", "mkv", "avi", "mov", "webm", "wmv", "flv", "m4v", "mpg", "mpeg",
        # archives and binaries
        "zip", "gz", "tgz", "bz2", "xz", "zst", "7z", "rar", "tar", "iso",
        "exe", "dll", "so", "dylib", "bin", "o", "a", "class", "jar", "pyc",
        "woff", "woff2", "ttf", "otf", "sqlite", "db",
    }
)
# fmt: on


def normalize_extensions(extensions: Iterable[str] | None) -> frozenset[str] | None:
    if extensions is None:
        return None
    normalized = frozenset(ext.lstrip(".").lower() for ext in extensions if ext)
    return normalized or None


def file_extension(path: Path) -> str:
    return path.suffix[1:].lower()


def wants_file(path: Path, allowed: frozenset[str] | None) -> bool:
    extension = file_extension(path)
    if extension in BINARY_EXTENSIONS:
        return False
    if allowed is None:
        return True
    return bool(extension) and extension in allowed


def has_utf8_prefix(path: Path, probe_bytes: int) -> bool:
    """Check that the first bytes of a file decode as UTF-8.

    A multi-byte character cut off at the end of the probe is not an error.
    """
    with path.open("rb") as fh:
        prefix = fh.read(probe_bytes)

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(prefix, final=False)
    except UnicodeDecodeError:
        return False
    return True


def _walk_dir(
    directory: Path,
    level: int,
    depth: int | None,
    allowed: frozenset[str] | None,
) -> Iterator[Path]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        if level == 0:
            raise
        logger.opt(exception=True).debug(f"Skipping unreadable directory {directory}")
        return

    for entry in entries:
        if entry.name.startswith("."):
            logger.debug(f"Skipping hidden entry {entry.path}")
            continue

        try:
            if entry.is_symlink():
                logger.debug(f"Skipping symlink {entry.path}")
                continue

            if entry.is_dir(follow_symlinks=False):
                if depth is None or level < depth:
                    yield from _walk_dir(Path(entry.path), level + 1, depth, allowed)
                continue

            if not entry.is_file(follow_symlinks=False):
                continue
        except OSError:
            logger.opt(exception=True).debug(f"Skipping entry {entry.path}")
            continue

        path = Path(entry.path)
        if wants_file(path, allowed):
            yield path
        else:
            logger.debug(f"Skipping {path} by extension")


def iter_text_files(
    paths: Iterable[str | os.PathLike[str]],
    depth: int | None = None,
    extensions: Iterable[str] | None = None,
) -> Iterator[tuple[Path, bool]]:
    """Yield ``(path, is_root)`` for candidate files under ``paths`` in a stable order.

    ``depth`` counts directory levels below each root: 0 only lists the
    root directory itself, ``None`` walks everything. Roots are always
    visited even when hidden; missing roots raise ``OSError``.
    """
    allowed = normalize_extensions(extensions)

    for root in paths:
        root = Path(root)
        mode = root.stat().st_mode

        if stat.S_ISDIR(mode):
            for path in _walk_dir(root, 0, depth, allowed):
                yield path, False
        elif wants_file(root, allowed):
            yield root, True
        else:
            logger.debug(f"Skipping {root} by extension")


def read_utf8_file(
    path: Path, probe_bytes: int | None = None, strict: bool = False
) -> str | None:
    """Read a UTF-8 text file, or return ``None`` when it isn't one.

    Errors opening or reading the file are logged and skipped unless
    ``strict`` is set, in which case they are raised.
    """
    probe_bytes = probe_bytes or config.utf8_probe_bytes
    try:
        if not has_utf8_prefix(path, probe_bytes):
            logger.debug(f"Skipping {path}: not UTF-8")
            return None
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.debug(f"Skipping {path}: not UTF-8 after the first {probe_bytes} bytes")
        return None
    except OSError:
        if strict:
            raise
        logger.opt(exception=True).debug(f"Skipping unreadable file {path}")
        return None


def read_text_from_paths(
    paths: Iterable[str | os.PathLike[str]],
    depth: int | None = None,
    extensions: Iterable[str] | None = None,
    probe_bytes: int | None = None,
) -> str:
    """Concatenate every readable text file under ``paths``, one per line.

    Files named directly in ``paths`` must be readable; files found while
    walking a directory are skipped when they aren't.
    """
    texts: list[str] = []
    for path, is_root in iter_text_files(paths, depth=depth, extensions=extensions):
        text = read_utf8_file(path, probe_bytes, strict=is_root)
        if text is not None:
            texts.append(text)

    logger.debug(f"Read {len(texts)} text files")
    return "\n".join(texts)
