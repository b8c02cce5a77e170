"""
Token budget gate

Purely advisory: measuring never changes or blocks output.
"""

from typing import Optional

import tiktoken

from ..config import appsettings
from ..models.markup import TokenBudget


class TokenCounter:
    """
    Counts tokens with a fixed tiktoken encoding (cl100k_base by default,
    the GPT-4 profile). The encoding is loaded on first use; tests may pass
    any object with an ``encode(text)`` method as ``encoder``.
    """

    def __init__(self, encoding_name: Optional[str] = None, encoder=None) -> None:
        self.encoding_name = encoding_name or appsettings.token_encoding
        self._encoder = encoder

    @property
    def encoder(self):
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.encoding_name)
        return self._encoder

    def count(self, text: str) -> int:
        if isinstance(self.encoder, tiktoken.Encoding):
            return len(self.encoder.encode(text, disallowed_special=()))
        return len(self.encoder.encode(text))


def tokenBudget_check(
    content: str,
    max_tokens: Optional[int],
    context: str,
    counter: TokenCounter,
) -> TokenBudget:
    """
    Measure ``content`` against an optional ceiling.

    Args:
        content: Final text
        max_tokens: Ceiling; None disables the check
        context: Name used in the advisory, e.g. 'Main SKILL.md'
        counter: Token counter

    Returns:
        TokenBudget with a warning only when the count strictly exceeds the
        ceiling
    """
    tokens = counter.count(content)
    if max_tokens is not None and tokens > max_tokens:
        return TokenBudget(
            tokens=tokens,
            warning=f"{context}: Token count ({tokens}) exceeds budget ({max_tokens})",
        )
    return TokenBudget(tokens=tokens)
