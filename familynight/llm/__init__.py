"""familynight LLM integration module.

Provides the injection-resistant prompt builder, the per-game prompt
templates, a thin async wrapper around the Anthropic API and the advisory
rate limiter that gates the generation path.
"""

from familynight.llm.client import LLMClient, LLMResponse
from familynight.llm.prompt_builder import (
    AIRequest,
    PromptMessage,
    build_ai_request,
    build_prompt,
)
from familynight.llm.rate_limiter import RateLimiter

__all__ = [
    "AIRequest",
    "LLMClient",
    "LLMResponse",
    "PromptMessage",
    "RateLimiter",
    "build_ai_request",
    "build_prompt",
]
