"""Load expressions from plain text files and archives."""
import lzma
from pathlib import Path
import tarfile
import tempfile
from typing import List
import zipfile

import py7zr
from py7zr.exceptions import ArchiveError

from arithmetic_evaluator.common.logger import logger

# Errors the archive libraries raise for truncated or corrupt input
CORRUPT_ARCHIVE_ERRORS = (zipfile.BadZipFile, tarfile.TarError, lzma.LZMAError, ArchiveError, EOFError)


def read_expressions(input_file: Path) -> List[str]:
    """
    Read one expression per line from a text file or an archive containing one.

    Blank lines are dropped and surrounding whitespace is stripped.

    :param Path input_file: Path to a .txt file or a .zip, .tar.xz or .7z archive

    :return: Expressions in file order
    :rtype: List[str]
    :raises ValueError: If the archive is unsupported, corrupt or contains no .txt file
    :raises OSError: If the file cannot be opened
    """
    if input_file.suffix == ".txt":
        content = input_file.read_text(encoding="utf-8")
    else:
        content = read_archive(input_file)

    expressions = [line.strip() for line in content.splitlines() if line.strip()]
    logger.info(f"📄 Loaded {len(expressions)} expressions from {input_file}")
    return expressions


def _read_zip(archive_path: Path) -> str:
    with zipfile.ZipFile(archive_path, "r") as zf:
        names = [name for name in zf.namelist() if name.endswith(".txt")]
        if not names:
            raise ValueError("📄❌ No .txt file found in zip archive")
        return zf.read(names[0]).decode("utf-8")


def _read_tar_xz(archive_path: Path) -> str:
    with tarfile.open(archive_path, "r:xz") as tf:
        members = [m for m in tf.getmembers() if m.isfile() and m.name.endswith(".txt")]
        if not members:
            raise ValueError("📄❌ No .txt file found in tar.xz archive")
        return tf.extractfile(members[0]).read().decode("utf-8")


def _read_7z(archive_path: Path) -> str:
    with py7zr.SevenZipFile(archive_path, mode="r") as archive:
        names = [name for name in archive.getnames() if name.endswith(".txt")]
        if not names:
            raise ValueError("📄❌ No .txt file found in 7z archive")
        # py7zr only decompresses to disk, so the member goes through a scratch directory
        with tempfile.TemporaryDirectory() as tmpdir:
            archive.extract(path=tmpdir, targets=[names[0]])
            return (Path(tmpdir) / names[0]).read_text(encoding="utf-8")


def read_archive(archive_path: Path) -> str:
    """
    Return the decoded content of the first .txt member of an archive.

    Zip and tar members are decoded in memory; nothing is written next to the input.

    :param Path archive_path: Path to a .zip, .tar.xz or .7z archive

    :return: Content of the .txt member
    :rtype: str
    :raises ValueError: If the format is unsupported, the archive is corrupt or it holds no .txt file
    """
    name = archive_path.name
    if name.endswith(".zip"):
        reader = _read_zip
    elif name.endswith(".tar.xz"):
        reader = _read_tar_xz
    elif name.endswith(".7z"):
        reader = _read_7z
    else:
        raise ValueError(f"📄❌ Unsupported archive format: {archive_path.suffix}")

    try:
        return reader(archive_path)
    except CORRUPT_ARCHIVE_ERRORS as exc:
        raise ValueError(f"📄❌ Could not read archive {name}: {exc}") from exc
