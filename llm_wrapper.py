"""
LLM wrapper for the symptom info chat service.

Provides:
- build_prompt: the fixed four-section instruction for a user query
- make_client: OpenAI-compatible client pointed at the Together endpoint
- call_llm: one chat completion; returns the first choice's text or None
- mock_llm: canned four-section reply used when USE_MOCK_LLM is set
- get_chat_answer: prompt -> upstream call -> StructuredAnswer
"""

import logging
from typing import Optional

from openai import OpenAI

from config import Settings
from pydantic_models import StructuredAnswer
from response_parser import format_response

logger = logging.getLogger(__name__)

INVALID_UPSTREAM_ERROR = "Invalid AI response"
INVALID_UPSTREAM_SUMMARY = "The AI service returned an invalid response."

# PROMPT_TEMPLATE: literal with {user_input} placeholder which we replace (not .format)
PROMPT_TEMPLATE = """Provide information about {user_input} with these sections:
1. A brief summary (one paragraph only)
2. Key symptoms (list format)
3. Home remedies (list format)
4. Precautions (list format)

Be concise and factual. Do not use redundant headings like "**Summary:** Summary:" or "Brief Summary:" - just use single headings."""


def build_prompt(user_input: str) -> str:
    return PROMPT_TEMPLATE.replace("{user_input}", user_input)


def mock_llm(user_input: str) -> str:
    return (
        f"{user_input.strip().capitalize()} is a common condition that usually improves "
        "with rest and home care. Educational only, not medical advice.\n\n"
        "Key Symptoms:\n"
        "- Fever or chills\n"
        "- Tiredness and body aches\n\n"
        "Home Remedies:\n"
        "- Rest and get plenty of sleep\n"
        "- Drink warm fluids to stay hydrated\n\n"
        "Precautions:\n"
        "- Avoid close contact with others while unwell\n"
        "- Consult a doctor if symptoms worsen or last more than a few days\n"
    )


def make_client(settings: Settings) -> OpenAI:
    if not settings.together_api_key:
        raise ValueError("TOGETHER_API_KEY is not set")

    kwargs = {}
    if settings.llm_timeout_seconds is not None:
        kwargs["timeout"] = settings.llm_timeout_seconds
    # one attempt per request, no retries
    return OpenAI(
        api_key=settings.together_api_key,
        base_url=settings.together_base_url,
        max_retries=0,
        **kwargs,
    )


def call_llm(user_input: str, settings: Settings, client=None) -> Optional[str]:
    """
    Send one chat completion for user_input.

    Returns the first choice's message content, or None when the reply has no
    choices or no content. Transport and API errors propagate to the caller.
    """
    if settings.use_mock_llm:
        raw = mock_llm(user_input)
        logger.debug("Mock LLM output:\n%s", raw)
        return raw

    if client is None:
        client = make_client(settings)

    resp = client.chat.completions.create(
        model=settings.llm_model,
        messages=[{"role": "user", "content": build_prompt(user_input)}],
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )

    choices = getattr(resp, "choices", None) or []
    if not choices:
        logger.error("Invalid AI response format: no choices in %r", resp)
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not content:
        logger.error("Invalid AI response format: first choice has no content: %r", choices[0])
        return None

    logger.debug("LLM output:\n%s", content)
    return content


def get_chat_answer(user_input: str, settings: Settings, client=None) -> StructuredAnswer:
    raw = call_llm(user_input, settings, client=client)
    if raw is None:
        return StructuredAnswer.failure(INVALID_UPSTREAM_ERROR, INVALID_UPSTREAM_SUMMARY)

    answer = format_response(raw)
    if answer.error is None:
        logger.info("Formatted AI response: %s", answer.to_json())
    return answer
