import re
from typing import Dict, List, Tuple

import structlog
from diff_match_patch import diff_match_patch

from retex.models import ChangeSummary

logger = structlog.get_logger(__name__)


def _word_diff(original_text: str, modified_text: str) -> List[Tuple[int, str]]:
    """
    Word-level diff of two texts as (op, text) pairs, op in {-1, 0, 1}.
    Tokens are encoded as single characters so diff_match_patch never splits a word.
    """
    dmp = diff_match_patch()

    # 1. Word-Level Tokenization & Encoding
    chars1, chars2, token_array = _words_to_chars(original_text, modified_text)

    # 2. Compute Diff on the Encoded Strings
    diffs = dmp.diff_main(chars1, chars2, False)

    # 3. Semantic Cleanup
    dmp.diff_cleanupSemantic(diffs)

    # 4. Decode back to Text
    dmp.diff_charsToLines(diffs, token_array)
    return diffs


def render_change_preview(original_text: str, modified_text: str) -> str:
    """
    Renders the modified text with CriticMarkup around what changed:
    {--deleted--}, {++inserted++}, {--old--}{++new++} for replacements.
    """
    parts = []
    for op, text in _word_diff(original_text, modified_text):
        if op == 0:
            parts.append(text)
        elif op == -1:
            parts.append(f"{{--{text}--}}")
        else:
            parts.append(f"{{++{text}++}}")
    return "".join(parts)


def summarize_changes(original_text: str, modified_text: str) -> ChangeSummary:
    """Counts inserted and deleted characters between the two texts."""
    summary = ChangeSummary()
    for op, text in _word_diff(original_text, modified_text):
        if op == 1:
            summary.inserted += len(text)
        elif op == -1:
            summary.deleted += len(text)
    logger.debug("Summarized changes", inserted=summary.inserted, deleted=summary.deleted)
    return summary


def _words_to_chars(text1: str, text2: str) -> Tuple[str, str, List[str]]:
    """
    Splits text into words/tokens and encodes them as unique Unicode characters.
    """
    token_array: List[str] = []
    token_hash: Dict[str, int] = {}
    split_pattern = r"(\s+|\w+|[^\w\s])"

    def encode_text(text: str) -> str:
        tokens = [t for t in re.split(split_pattern, text) if t]
        encoded_chars = []
        for token in tokens:
            if token in token_hash:
                encoded_chars.append(chr(token_hash[token]))
            else:
                code = len(token_array)
                token_hash[token] = code
                token_array.append(token)
                encoded_chars.append(chr(code))
        return "".join(encoded_chars)

    chars1 = encode_text(text1)
    chars2 = encode_text(text2)
    return chars1, chars2, token_array
