"""LLM provider implementations.

Selection order at startup (first configured wins):
    1. AnthropicLLMProvider -- Claude Messages API (ANTHROPIC_API_KEY)
    2. OpenAILLMProvider    -- OpenAI or OpenAI-compatible endpoint (OPENAI_API_KEY)
    3. OllamaLLMProvider    -- local Ollama server (always configured)
"""

from syncbrain.providers.llm.anthropic_provider import AnthropicLLMProvider
from syncbrain.providers.llm.ollama_provider import OllamaLLMProvider
from syncbrain.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OllamaLLMProvider", "OpenAILLMProvider"]
