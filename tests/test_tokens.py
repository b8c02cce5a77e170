"""
Token budget gate tests

An injected encoder stands in for tiktoken.
"""

from skilldown.lib.tokens import TokenCounter, tokenBudget_check


class TestBudget:
    """Advisory budget messages"""

    def test_count_uses_encoder(self, fake_encoder):
        counter = TokenCounter(encoder=fake_encoder)
        assert counter.count("a b c") == 3

    def test_no_ceiling(self, fake_encoder):
        """Without a ceiling there is never a message"""
        budget = tokenBudget_check("a b c d", None, "Main SKILL.md", TokenCounter(encoder=fake_encoder))
        assert budget.tokens == 4
        assert budget.warning is None

    def test_exceeded(self, fake_encoder):
        """The message names the context, count and ceiling"""
        budget = tokenBudget_check("a b c d", 3, "Main SKILL.md", TokenCounter(encoder=fake_encoder))
        assert budget.warning == "Main SKILL.md: Token count (4) exceeds budget (3)"

    def test_at_ceiling(self, fake_encoder):
        """Exactly at the ceiling is fine"""
        budget = tokenBudget_check("a b c d", 4, "Reference file: x.md", TokenCounter(encoder=fake_encoder))
        assert budget.warning is None

    def test_encoding_name_default(self):
        """The encoding is only loaded on first count"""
        counter = TokenCounter()
        assert counter.encoding_name == "cl100k_base"
        assert counter._encoder is None
