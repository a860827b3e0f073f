"""Input sanitization - regex-based cleanup of user content.

PATTERNS REPLACED (with a single space):
1. HTML/XML-style tags
2. Control characters
3. Runs of whitespace
"""

import re

import structlog

logger = structlog.get_logger(__name__)

MAX_CONTENT_LENGTH = 12000

TAG_PATTERN = re.compile(r"<[^>]*>")
CONTROL_CHAR_PATTERN = re.compile(r"[\u0000-\u001F\u007F]")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Topic inference: first sentence-like fragment, first N words
TOPIC_SPLIT_PATTERN = re.compile(r"[\n.!?]")
TOPIC_MAX_WORDS = 12


def sanitize_user_input(text: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Strip tags and control characters, collapse whitespace, clamp length.

    Idempotent: sanitizing sanitized text returns it unchanged.
    """
    cleaned = (text or "").strip()
    cleaned = TAG_PATTERN.sub(" ", cleaned)
    cleaned = CONTROL_CHAR_PATTERN.sub(" ", cleaned)
    cleaned = WHITESPACE_PATTERN.sub(" ", cleaned)
    cleaned = cleaned[:max_length].strip()

    if len(cleaned) < len(text or ""):
        logger.debug(
            "content_sanitized",
            original_length=len(text or ""),
            sanitized_length=len(cleaned),
        )
    return cleaned


def infer_topic(content: str) -> str:
    """Crude topic for the trends stage.

    First non-empty fragment split on newline / . / ! / ?, truncated to its
    first 12 space-separated words. Changing this changes what the trends
    provider is asked about.
    """
    fragment = next(
        (part for part in TOPIC_SPLIT_PATTERN.split(content) if part),
        content,
    )
    return " ".join(fragment.split(" ")[:TOPIC_MAX_WORDS])
