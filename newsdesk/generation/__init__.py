"""Text generation for article rewriting."""

from .errors import GenerationConfigError, GenerationError, RateLimitedError
from .llm_provider import MockTextGenerator, OpenAITextGenerator, TextGenerator, build_text_generator
from .retry import RetryPolicy
from .rewriter import ArticleRewriter, strip_quotes

__all__ = [
    "ArticleRewriter",
    "GenerationConfigError",
    "GenerationError",
    "MockTextGenerator",
    "OpenAITextGenerator",
    "RateLimitedError",
    "RetryPolicy",
    "TextGenerator",
    "build_text_generator",
    "strip_quotes",
]
