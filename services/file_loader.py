"""Reads uploaded files into plain text for prompting."""

import os
import re

import config
from utils.logger import get_logger
from utils.error_handler import ExtractionError

logger = get_logger()

# Control characters except tab, newline and carriage return
_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
_BLANK_RUNS = re.compile(r'[ \t]{2,}')
_READABLE = re.compile(r'[A-Za-z0-9]')


def _decode(data: bytes) -> str:
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        return data.decode('latin-1')


def clean_binary_text(text: str) -> str:
    """Drops control characters and squeezes the gaps they leave behind."""
    text = _CONTROL_CHARS.sub(' ', text)
    text = _BLANK_RUNS.sub(' ', text)
    return "\n".join(line.strip() for line in text.splitlines() if line.strip())


def extract_text_from_bytes(data: bytes, filename: str) -> str:
    """Returns usable text from an uploaded file's bytes.

    Plain text extensions pass through unchanged. Anything else is decoded
    leniently and stripped of control characters on a best-effort basis.

    Raises:
        ExtractionError: If a non-text file yields too little readable text.
    """
    extension = os.path.splitext(filename)[1].lower()
    text = _decode(data)
    if extension in config.PLAIN_TEXT_EXTENSIONS:
        logger.info(f"Loaded plain text file '{filename}' ({len(text)} chars).")
        return text

    cleaned = clean_binary_text(text)
    readable = len(_READABLE.findall(cleaned))
    if readable < config.MIN_EXTRACTED_CHARS:
        logger.warning(f"Extraction from '{filename}' produced only {readable} readable characters.")
        raise ExtractionError(
            f"Could not extract readable text from '{filename}'. Try copying the text in directly."
        )
    logger.info(f"Extracted {len(cleaned)} chars from '{filename}' ({extension or 'no extension'}).")
    return cleaned


def extract_text(path: str) -> str:
    """Reads a file from disk and extracts its text.

    Raises:
        ExtractionError: If the file cannot be read or has too little readable text.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ExtractionError(f"Could not open '{path}': {e}") from e
    return extract_text_from_bytes(data, os.path.basename(path))
