import re
from typing import Callable, Dict, List

from pagechat.config import CHUNKING

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")

Chunker = Callable[[str, int], List[str]]


def _check_size(max_chunk_size: int) -> None:
    if isinstance(max_chunk_size, bool) or not isinstance(max_chunk_size, int) or max_chunk_size < 1:
        raise ValueError(f"max_chunk_size must be a positive integer, got {max_chunk_size!r}")


def split_sentences(paragraph: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(paragraph) if s.strip()]


def chunk_text(text: str, max_chunk_size: int = CHUNKING["size"]) -> List[str]:
    """Split text into chunks on paragraph and sentence boundaries.

    Sentences are packed greedily; a new chunk starts whenever the next
    sentence would push the current one past ``max_chunk_size``. Sentences
    are never split, so one longer than the limit becomes its own
    oversized chunk.
    """
    _check_size(max_chunk_size)

    chunks: List[str] = []
    paragraphs: List[List[str]] = []   # paragraphs of the chunk being built
    size = 0

    def flush():
        nonlocal paragraphs, size
        rendered = PARAGRAPH_SEPARATOR.join(
            SENTENCE_SEPARATOR.join(p) for p in paragraphs if p
        ).strip()
        if rendered:
            chunks.append(rendered)
        paragraphs = []
        size = 0

    for paragraph in _PARAGRAPH_SPLIT.split(text or ""):
        sentences = split_sentences(paragraph)
        if not sentences:
            continue

        if size and size + len(PARAGRAPH_SEPARATOR) + len(paragraph.strip()) > max_chunk_size:
            flush()

        paragraphs.append([])
        for sentence in sentences:
            current = paragraphs[-1]
            if current:
                extra = len(SENTENCE_SEPARATOR)
            elif size:
                extra = len(PARAGRAPH_SEPARATOR)
            else:
                extra = 0

            if size and size + extra + len(sentence) > max_chunk_size:
                flush()
                paragraphs.append([])
                current = paragraphs[-1]
                extra = 0

            current.append(sentence)
            size += extra + len(sentence)

    flush()
    return chunks


def chunk_fixed_window(text: str, max_chunk_size: int = CHUNKING["size"]) -> List[str]:
    """Contiguous slices of exactly ``max_chunk_size`` characters; the last may be shorter."""
    _check_size(max_chunk_size)
    text = text or ""
    return [text[i:i + max_chunk_size] for i in range(0, len(text), max_chunk_size)]


CHUNKERS: Dict[str, Chunker] = {
    "sentence": chunk_text,
    "fixed": chunk_fixed_window,
}


def get_chunker(strategy: str = CHUNKING["strategy"]) -> Chunker:
    try:
        return CHUNKERS[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown chunking strategy {strategy!r}; expected one of {sorted(CHUNKERS)}"
        ) from None
