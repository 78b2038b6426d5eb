from __future__ import annotations
import json
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional, Union

import openai
from openai import OpenAI

from errors import ConfigurationError, DispatchError, DispatchErrorKind

LOG = logging.getLogger("llm")

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful career coach AI. "
    "Always respond with valid JSON when asked for JSON. "
    "Never wrap JSON in markdown code blocks."
)


# ------------------------------
# Outcomes / policy
# ------------------------------
@dataclass(frozen=True)
class Success:
    raw_text: str
    attempts_made: int = 1

    ok = True

    def unwrap(self) -> str:
        return self.raw_text


@dataclass(frozen=True)
class Failure:
    kind: DispatchErrorKind
    message: str
    attempts_made: int

    ok = False

    def unwrap(self) -> str:
        raise DispatchError(self.kind, self.message, self.attempts_made)


DispatchOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class RetryPolicy:
    """How many extra attempts a dispatch may make, and how long to wait between them."""
    max_retries: int = 1
    delay: float = 1.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")

    @classmethod
    def immediate(cls, max_retries: int = 1) -> "RetryPolicy":
        return cls(max_retries=max_retries, delay=0.0)

    def wait_for(self, attempt: int) -> float:
        # fixed backoff; attempt is 1-based and kept for policies that scale it
        return self.delay


class _AttemptFailed(Exception):
    def __init__(self, kind: DispatchErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


def _error_message(err: Any) -> str:
    """Pull a human-readable message out of a provider error payload."""
    if isinstance(err, Mapping):
        inner = err.get("error", err)
        if isinstance(inner, Mapping):
            if inner.get("message"):
                return str(inner["message"])
            return json.dumps(dict(inner))
        return str(inner)
    message = getattr(err, "message", None)
    return str(message or err)


def _content_of(completion: Any) -> str:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) or ""


# ------------------------------
# Dispatcher
# ------------------------------
class PromptDispatcher:
    """Sends one prompt to an OpenAI-compatible chat endpoint with bounded retry.

    Attempts run strictly one after another. Provider error payloads, empty
    content and transport faults are retried; whatever the content looks like
    is never a reason to retry.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.4,
        max_tokens: int = 2048,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        policy: Optional[RetryPolicy] = None,
        timeout: float = 60.0,
        client: Any = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self._client = client
        self._sleep = sleep

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any], **overrides) -> "PromptDispatcher":
        kwargs = dict(
            api_key=cfg.get("LLM_API_KEY"),
            base_url=cfg.get("LLM_BASE_URL", DEFAULT_BASE_URL),
            model=cfg.get("LLM_MODEL", DEFAULT_MODEL),
            temperature=cfg.get("LLM_TEMPERATURE", 0.4),
            max_tokens=cfg.get("LLM_MAX_TOKENS", 2048),
            timeout=cfg.get("LLM_TIMEOUT", 60.0),
            policy=RetryPolicy(
                max_retries=cfg.get("LLM_MAX_RETRIES", 1),
                delay=cfg.get("LLM_RETRY_DELAY", 1.0),
            ),
        )
        kwargs.update(overrides)
        return cls(**kwargs)

    def get_client(self):
        if not self.api_key:
            raise ConfigurationError("GROQ_API_KEY not configured")
        if self._client is None:
            # the SDK's own retries are off; self.policy decides
            self._client = OpenAI(
                base_url=self.base_url,
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def _attempt(self, client, prompt_text: str) -> str:
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": prompt_text},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            raise _AttemptFailed(DispatchErrorKind.PROVIDER_ERROR, _error_message(e.body if e.body is not None else e))
        except openai.APIConnectionError as e:
            raise _AttemptFailed(DispatchErrorKind.TRANSPORT_ERROR, str(e) or "connection error")
        except openai.APIError as e:
            raise _AttemptFailed(DispatchErrorKind.TRANSPORT_ERROR, _error_message(e))

        error = getattr(completion, "error", None)
        if error:
            raise _AttemptFailed(DispatchErrorKind.PROVIDER_ERROR, _error_message(error))

        content = _content_of(completion)
        if not content:
            raise _AttemptFailed(DispatchErrorKind.EMPTY_RESPONSE, "Provider returned empty response")
        return content

    def dispatch(self, prompt_text: str, max_retries: Optional[int] = None) -> DispatchOutcome:
        if not prompt_text or not prompt_text.strip():
            raise ValueError("prompt_text must be non-empty")
        client = self.get_client()
        policy = self.policy if max_retries is None else replace(self.policy, max_retries=max_retries)

        total = policy.max_retries + 1
        last: Optional[_AttemptFailed] = None
        for attempt in range(1, total + 1):
            try:
                content = self._attempt(client, prompt_text)
            except _AttemptFailed as e:
                last = e
                LOG.warning("LLM %s (attempt %d/%d): %s", e.kind.value, attempt, total, e.message)
                if attempt < total:
                    wait = policy.wait_for(attempt)
                    LOG.info("Retrying in %.1fs...", wait)
                    self._sleep(wait)
                continue
            LOG.info("LLM response (%d chars, attempt %d)", len(content), attempt)
            return Success(content, attempt)

        return Failure(last.kind, last.message, total)
