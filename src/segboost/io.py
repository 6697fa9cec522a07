"""File collaborators: corpus, feature file and model file handling.

Everything here is plain line-oriented I/O around the core; failures are
logged and re-raised as ``SegBoostIOError`` naming the path and operation.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from bs4 import UnicodeDammit

from .exceptions import SegBoostIOError
from .model import Model
from .segmenter import Segmenter

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_text_file(filepath: PathLike) -> str:
    """Read a whole file as text (UTF-8 with encoding detection fallback)."""
    try:
        with open(filepath, 'rb') as f:
            raw_data = f.read()
    except OSError as e:
        error_msg = f"Error reading file {filepath}: {e}"
        logger.error(error_msg)
        raise SegBoostIOError(error_msg) from e
    try:
        return raw_data.decode('utf-8', 'strict')
    except UnicodeError:
        dammit = UnicodeDammit(raw_data)
        if dammit.unicode_markup is None:
            raise SegBoostIOError(f"Error decoding file {filepath}: unknown encoding") from None
        logger.warning("File %s is not valid UTF-8; decoded as %s", filepath, dammit.original_encoding)
        return dammit.unicode_markup


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def split_lines(text: str) -> List[str]:
    """Split ``text`` on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Unlike ``str.splitlines`` this keeps form feeds, U+2028 and the other
    Unicode line separators inside a line, so every line written by
    ``write_lines`` reads back as exactly one line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [_strip_newline(line) for line in lines]


def read_lines(filepath: PathLike) -> List[str]:
    """Return the lines of a text file without trailing newlines."""
    return split_lines(load_text_file(filepath))


def iter_file_lines(filepath: PathLike) -> Iterator[str]:
    """Stream the lines of a UTF-8 file, split on ``\\n`` like ``read_lines``."""
    try:
        with open(filepath, 'r', encoding='utf-8', newline='\n') as f:
            for line in f:
                yield _strip_newline(line)
    except (OSError, UnicodeDecodeError) as e:
        error_msg = f"Error reading file {filepath}: {e}"
        logger.error(error_msg)
        raise SegBoostIOError(error_msg) from e


def write_lines(lines: Iterable[str], filepath: PathLike, operation: str = "writing") -> int:
    """Write each line followed by a newline; returns the line count."""
    parent_dir = os.path.dirname(str(filepath))
    count = 0
    try:
        if parent_dir:
            os.makedirs(parent_dir, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8', newline='\n') as f:
            for line in lines:
                f.write(line)
                f.write("\n")
                count += 1
    except OSError as e:
        error_msg = f"Error {operation} {filepath}: {e}"
        logger.error(error_msg)
        raise SegBoostIOError(error_msg) from e
    return count


def format_instance(features: Iterable[str], label: int) -> str:
    """Render one instance as a feature-file line: label, then sorted features."""
    return "\t".join([str(label)] + sorted(features))


def iter_feature_lines(segmenter: Segmenter, corpus_lines: Iterable[str]) -> Iterator[str]:
    for line in corpus_lines:
        line = line.strip()
        if not line:
            continue
        for features, label in segmenter.instances(line):
            yield format_instance(features, label)


def write_feature_file(segmenter: Segmenter, corpus_lines: Iterable[str], filepath: PathLike) -> int:
    """Write the training instances of a gold corpus; returns how many were written."""
    count = write_lines(iter_feature_lines(segmenter, corpus_lines), filepath, "writing features to")
    logger.info("Wrote %d instances to %s", count, filepath)
    return count


def load_model(filepath: PathLike) -> Model:
    """Load a model file.

    Raises:
        SegBoostIOError: If the file cannot be read
        ModelFormatError: If a line cannot be parsed
    """
    model = Model.load(read_lines(filepath), source=str(filepath))
    logger.info("Model loaded from %s (%d features)", filepath, len(model) - 1)
    return model


def save_model(model: Model, filepath: PathLike) -> None:
    write_lines(model.iter_lines(), filepath, "saving model to")
    logger.info("Model saved to %s", filepath)


def iter_segmented(segmenter: Segmenter, lines: Iterable[str]) -> Iterator[str]:
    """Yield one space-joined output line per input line."""
    for words in segmenter.segment_lines(lines):
        yield " ".join(words)


def segment_file(segmenter: Segmenter, input_path: PathLike, output_path: PathLike) -> int:
    """Segment every line of ``input_path`` into ``output_path``; returns the line count."""
    count = write_lines(iter_segmented(segmenter, read_lines(input_path)), output_path, "writing segmentation to")
    logger.info("Segmented %d lines from %s into %s", count, input_path, output_path)
    return count
