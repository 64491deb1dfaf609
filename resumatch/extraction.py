"""
Client for the AI service that turns a resume into structured fields.

Talks to an OpenAI-compatible chat-completions endpoint (Groq by default).
Timeouts and connection errors are retried with backoff; repeated failures
open a circuit breaker so a dead service fails each resume quickly.
"""

import json
import re
from typing import Any, Dict, Optional

import requests

from .env import DEFAULT_GROQ_BASE_URL, DEFAULT_GROQ_MODEL
from .logger import get_logger
from .models import ExtractedRecord
from .retry import CircuitBreaker, CircuitOpenError, RetryError, exponential_backoff, should_retry_http_status

PARSING_PROMPT = """You are an AI bot designed to parse resumes and extract the following details in JSON:
- full_name
- university_name (short form preferred)
- national_university/international_university
- email_id (or "N/A")
- github_link (or "N/A")
- employment_details: [company, position, years, location, tag]
- total_professional_experience (or "Fresh Graduate")
- technical_skills (top 5 based on JD)
- soft_skills (top 5 based on JD)
- location
Return the result in proper JSON and sentence case."""

SUMMARY_PROMPT = (
    "Based on the job description and the candidate's resume, write a summary of "
    "3 sentences about the relevance and suitability of the candidate for the job."
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class ExtractionError(Exception):
    """The extraction service could not produce a record for a resume."""


class TransientServiceError(Exception):
    """Retryable HTTP status from the service (rate limit, 5xx)."""


def parse_completion(content: Optional[str]) -> Dict[str, Any]:
    """Pull the first JSON object out of a model reply."""
    if not content or not content.strip():
        raise ExtractionError("Empty response from extraction service")
    match = _JSON_OBJECT.search(content)
    if not match:
        raise ExtractionError("No JSON found in extraction response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Invalid JSON in extraction response: {e}") from e
    if not isinstance(parsed, dict):
        raise ExtractionError("Extraction response is not a JSON object")
    return parsed


def _user_message(resume_text: str, job_text: str) -> str:
    return f"Job Description:\n{job_text}\n\nResume:\n{resume_text}"


class GroqExtractor:
    """
    Callable extractor: ``extractor(resume_text, job_text) -> ExtractedRecord``.

    Also usable as a summarizer through ``summarize``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GROQ_MODEL,
        base_url: str = DEFAULT_GROQ_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 2,
        base_delay: float = 1.0,
        breaker: Optional[CircuitBreaker] = None,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("Missing GROQ_API_KEY. Set env var or pass --api-key.")
        self.api_key = api_key
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker(failure_threshold=3, recovery_timeout=60)
        self.session = session or requests.Session()

        def _log_retry(attempt, exc, delay):
            get_logger().warning(
                "Extraction call failed, retrying",
                attempt=attempt, error=str(exc), delay=delay,
            )

        self._post = exponential_backoff(
            max_retries=max_retries,
            base_delay=base_delay,
            exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, TransientServiceError),
            on_retry=_log_retry,
        )(self._post_once)

    def _post_once(self, payload: dict) -> dict:
        resp = self.session.post(
            self.endpoint,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        if should_retry_http_status(resp.status_code):
            raise TransientServiceError(f"Extraction service returned {resp.status_code}")
        resp.raise_for_status()
        return resp.json()

    def complete(self, system_prompt: str, user_message: str, temperature: float, max_tokens: int) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        logger = get_logger()
        logger.record_extraction_call()
        try:
            data = self.breaker.call(self._post, payload)
        except CircuitOpenError as e:
            raise ExtractionError(str(e)) from e
        except RetryError as e:
            raise ExtractionError(f"Extraction service unavailable: {e}") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            logger.error("Extraction request failed", status=status)
            raise ExtractionError(f"Extraction request failed ({status})") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise ExtractionError(f"Extraction request error: {e}") from e

        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ExtractionError("Malformed completion payload") from e

    def extract(self, resume_text: str, job_text: str) -> ExtractedRecord:
        content = self.complete(
            PARSING_PROMPT, _user_message(resume_text, job_text), temperature=0.1, max_tokens=2048
        )
        return ExtractedRecord.from_extraction(parse_completion(content))

    def summarize(self, resume_text: str, job_text: str) -> str:
        content = self.complete(
            SUMMARY_PROMPT, _user_message(resume_text, job_text), temperature=0.3, max_tokens=500
        )
        return content.strip() or "Unable to generate summary"

    def __call__(self, resume_text: str, job_text: str) -> ExtractedRecord:
        return self.extract(resume_text, job_text)
