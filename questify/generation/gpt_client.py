"""
Shared LLM helper for the generation service.

The model is reached through the OpenAI SDK pointed at an OpenAI-compatible
endpoint (Gemini by default) and is asked for a JSON object.

Model: gemini-2.5-flash  (override with QUESTIFY_MODEL env var)
"""

from openai import AsyncOpenAI

from questify import config
from questify.generation.errors import ConfigurationError

MISSING_KEY_MESSAGE = (
    "Missing Gemini/Google API Key. Please configure GEMINI_API_KEY "
    "(or GOOGLE_API_KEY) in environment variables."
)

# Lazy singleton, rebuilt when the credential changes
_client: AsyncOpenAI | None = None
_client_key: str | None = None


def require_api_key() -> str:
    """Return the generation credential or raise ConfigurationError."""
    api_key = config.get_generation_api_key()
    if not api_key:
        raise ConfigurationError(MISSING_KEY_MESSAGE)
    return api_key


def _get_client() -> AsyncOpenAI:
    global _client, _client_key
    api_key = require_api_key()
    if _client is None or _client_key != api_key:
        _client = AsyncOpenAI(api_key=api_key, base_url=config.QUESTIFY_LLM_BASE_URL)
        _client_key = api_key
    return _client


async def call_model(
    prompt: str,
    system: str = "You are an expert educational content generator. Output only valid JSON.",
    temperature: float = 0.7,
) -> str:
    """
    Send one prompt and return the raw text of the reply.

    The reply is constrained to a JSON object; it may still arrive wrapped in
    markdown fences, which the caller strips.
    """
    client = _get_client()
    response = await client.chat.completions.create(
        model=config.QUESTIFY_MODEL,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        temperature=temperature,
        response_format={"type": "json_object"},
    )
    return response.choices[0].message.content or ""
