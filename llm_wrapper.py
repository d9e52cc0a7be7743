"""
Model access and request orchestration for the symptom analysis API.

Provides:
- OpenAIModelClient: async chat completion against OpenAI
- MockModelClient: offline client used when no OPENAI_API_KEY is configured
- build_model_client: picks one of the two from Settings
- parse_analysis_request: validates a JSON body into an AnalysisRequest
- get_symptom_analysis: prompt -> model -> classify/format -> AnalysisResponse
"""

import asyncio
import logging
from datetime import datetime, timezone

import openai
from pydantic import ValidationError as PydanticValidationError

from config import RAW_LOGGER_NAME, Settings
from critical_rules import is_critical, matched_keywords
from errors import AnalysisFailedError, ValidationError
from formatter import format_response
from prompt_builder import SYSTEM_MESSAGE, build_prompt
from pydantic_models import AnalysisRequest, AnalysisResponse

logger = logging.getLogger("bantuhealth.llm")
raw_logger = logging.getLogger(RAW_LOGGER_NAME)

# Failures worth another attempt when MODEL_MAX_RETRIES > 0
TRANSIENT_ERRORS = (
    asyncio.TimeoutError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)

MOCK_COMPLETION = """1. INITIAL ASSESSMENT:
- Educational only. The symptoms described are common and have many possible causes.
- Potential conditions to consider: a self-limiting viral illness.

2. RECOMMENDATIONS:
- Rest, stay hydrated and monitor your symptoms.
- Consult a healthcare provider if symptoms persist or get worse.

3. URGENCY LEVEL:
- Low. If warning signs such as chest pain or difficulty breathing appear, get help right away.

4. DISCLAIMER:
This is educational information, not medical advice. Always consult a qualified healthcare professional."""


def _log_raw(marker: str, text: str) -> None:
    raw_logger.info("----%s----\n%s", marker, text)


class MockModelClient:
    """Returns a fixed, well-formed completion. No network access."""

    model_name = "mock"

    async def complete(self, prompt: str) -> str:
        _log_raw("MOCK CALL", MOCK_COMPLETION)
        return MOCK_COMPLETION


class OpenAIModelClient:
    def __init__(self, api_key: str, model_name: str, temperature: float = 0.0, max_tokens: int = 1024):
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._api_key = api_key

    async def complete(self, prompt: str) -> str:
        # Flask runs each async view in its own event loop, so the HTTP client
        # is opened per call. Retries are handled by get_symptom_analysis.
        async with openai.AsyncOpenAI(api_key=self._api_key, max_retries=0) as client:
            resp = await client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        if not resp.choices:
            raise ValueError("Model returned no choices")
        text = resp.choices[0].message.content
        _log_raw("CALL", text or "")
        return text or ""


def build_model_client(settings: Settings):
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set, using the mock model client")
        return MockModelClient()
    return OpenAIModelClient(
        api_key=settings.openai_api_key,
        model_name=settings.model_name,
        temperature=settings.model_temperature,
        max_tokens=settings.model_max_tokens,
    )


def parse_analysis_request(payload) -> AnalysisRequest:
    if not isinstance(payload, dict):
        raise ValidationError(errors=[{"field": "body", "message": "Request body must be a JSON object"}])
    try:
        return AnalysisRequest.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(errors=errors) from e


async def _complete_with_retries(model_client, prompt: str, settings: Settings) -> str:
    attempt = 0
    while True:
        try:
            return await asyncio.wait_for(model_client.complete(prompt), timeout=settings.model_timeout_secs)
        except TRANSIENT_ERRORS as e:
            if attempt >= settings.model_max_retries:
                raise
            delay = settings.model_retry_backoff_secs * (2 ** attempt)
            attempt += 1
            logger.warning("Transient model error (%s), retry %d in %.2fs", type(e).__name__, attempt, delay)
            await asyncio.sleep(delay)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def get_symptom_analysis(request: AnalysisRequest, settings: Settings, model_client) -> AnalysisResponse:
    """
    Run one analysis: build the prompt, call the model once (plus any
    configured retries), then classify and format the completion.

    Raises AnalysisFailedError if the model call fails, times out or comes
    back empty. Nothing partial is ever returned.
    """
    prompt = build_prompt(request.symptoms, request.additional_info)
    try:
        raw = await _complete_with_retries(model_client, prompt, settings)
    except asyncio.TimeoutError as e:
        logger.error("Model call timed out after %.1fs", settings.model_timeout_secs)
        raise AnalysisFailedError(detail=f"Model call timed out after {settings.model_timeout_secs}s") from e
    except Exception as e:
        logger.exception("Error fetching analysis from model %s", model_client.model_name)
        raise AnalysisFailedError(detail=str(e) or type(e).__name__) from e

    if not raw or not raw.strip():
        logger.error("Model %s returned an empty completion", model_client.model_name)
        raise AnalysisFailedError(detail="Model returned an empty completion")

    formatted = format_response(raw)
    critical = is_critical(raw)
    if critical:
        logger.info("Critical keywords matched: %s", ", ".join(matched_keywords(raw)))
    logger.info("Analysis done: %d symptom(s), critical=%s", len(request.symptoms), critical)

    return AnalysisResponse(
        analysis=formatted.cleaned_text,
        structured=formatted.sections,
        critical=critical,
        timestamp=utc_timestamp(),
    )

