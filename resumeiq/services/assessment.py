from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Sequence

from pydantic import ValidationError

from resumeiq.ai.prompt import build_jd_messages, build_role_messages
from resumeiq.ai.types import AIClient, ChatMessage
from resumeiq.schemas.assessment import JDAssessment, RoleAssessment

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.2

_FENCE_OPEN = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AssessmentError(RuntimeError):
    def __init__(self, message: str, *, code: str):
        super().__init__(message)
        self.code = code


class AIServiceUnavailable(AssessmentError):
    def __init__(self, message: str = "AI service call failed."):
        super().__init__(message, code="ai_unavailable")


class AIResponseMalformed(AssessmentError):
    def __init__(self, message: str = "AI returned no valid JSON."):
        super().__init__(message, code="ai_malformed")


class AIResponseInvalidShape(AssessmentError):
    def __init__(self, message: str = "AI response is missing required fields."):
        super().__init__(message, code="ai_invalid_shape")


def parse_json_object(text: str) -> dict[str, Any]:
    """Pull the first ``{...}`` span out of a chat reply and decode it."""
    cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text or "")).strip()
    match = _JSON_OBJECT.search(cleaned)
    if not match:
        raise AIResponseMalformed()
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise AIResponseMalformed(f"AI returned invalid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise AIResponseMalformed()
    return payload


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{loc}: {error.get('msg')}")
    return "; ".join(parts)


class AssessmentClient:
    """Sends resume text to the chat model and returns a validated assessment.

    One call per operation. Transport failures raise ``AIServiceUnavailable``;
    unparseable replies raise ``AIResponseMalformed``; replies that parse but
    lack required fields raise ``AIResponseInvalidShape``.
    """

    def __init__(self, ai: AIClient, *, temperature: float = DEFAULT_TEMPERATURE):
        self._ai = ai
        self._temperature = temperature

    async def aclose(self) -> None:
        close = getattr(self._ai, "aclose", None)
        if close is not None:
            await close()

    async def assess_for_role(self, resume_text: str, role: str) -> RoleAssessment:
        payload = await self._request(build_role_messages(resume_text, role), mode="role")
        try:
            return RoleAssessment.model_validate({**payload, "kind": "role"})
        except ValidationError as exc:
            raise AIResponseInvalidShape(_describe(exc)) from exc

    async def assess_for_jd(self, resume_text: str, job_description: str) -> JDAssessment:
        payload = await self._request(build_jd_messages(resume_text, job_description), mode="jd")
        try:
            return JDAssessment.model_validate({**payload, "kind": "jd"})
        except ValidationError as exc:
            raise AIResponseInvalidShape(_describe(exc)) from exc

    async def _request(self, messages: Sequence[ChatMessage], *, mode: str) -> dict[str, Any]:
        started = time.perf_counter()
        try:
            reply = await self._ai.complete(messages, temperature=self._temperature)
        except Exception as exc:  # noqa: BLE001 - any SDK/transport error means the service is unavailable
            logger.warning(
                "assessment_call_failed mode=%s latency_ms=%s error=%s",
                mode,
                int((time.perf_counter() - started) * 1000),
                exc,
            )
            raise AIServiceUnavailable() from exc

        logger.info(
            "assessment_call_done mode=%s latency_ms=%s reply_chars=%s",
            mode,
            int((time.perf_counter() - started) * 1000),
            len(reply or ""),
        )
        return parse_json_object(reply)
