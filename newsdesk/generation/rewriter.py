"""Title and body rewriting over a text generator."""

from typing import Optional

from .llm_provider import TextGenerator
from .prompts import body_prompt, title_prompt
from .retry import RetryPolicy

QUOTE_CHARS = "\"'“”‘’`"


def strip_quotes(text: str) -> str:
    """Remove quote characters wrapping a generated headline."""
    return text.strip().strip(QUOTE_CHARS).strip()


class ArticleRewriter:
    """Rewrites titles and bodies. Each call retries rate limits independently.

    Failures propagate as GenerationError; callers choose the fallback.
    """

    def __init__(self, generator: TextGenerator, retry_policy: Optional[RetryPolicy] = None) -> None:
        self.generator = generator
        self.retry_policy = retry_policy or RetryPolicy()

    def rewrite_body(self, title: str, content: str, source: str) -> str:
        prompt = body_prompt(title=title, content=content, source=source)
        return self.retry_policy.call(lambda: self.generator.generate(prompt), label="Body rewrite")

    def rewrite_title(self, title: str, content: str = "") -> str:
        """New headline; the original when the model returns only quotes or whitespace."""
        prompt = title_prompt(title=title, content=content)
        generated = self.retry_policy.call(lambda: self.generator.generate(prompt), label="Title rewrite")
        return strip_quotes(generated) or title
