"""
Pytest configuration for the analysis test suite.

Every test module runs as its own logging run, and provider API keys are
removed from the environment so no test can reach a real provider.

Usage:
    pytest testing/
    pytest testing/test_service.py -k fallback
"""

import json
import os
from collections.abc import Generator

import httpx
import pytest

from core.analysis import AnalysisConfig, RetryPolicy
from core.logging import end_run, start_run

PROVIDER_ENV_VARS = ("OPENAI_API_KEY", "GEMINI_API_KEY", "OPENAI_MODEL", "GEMINI_MODEL")

STATISTICAL_ABSTRACT = (
    "Abstract. We studied 240 participants (n = 240) using a randomized controlled design. "
    "Our results demonstrate a significant improvement in recall with spaced practice (p < 0.05). "
    "Regression analysis of the dataset confirmed the effect across age groups. "
    "The methodology followed a preregistered protocol with blinded assessors. "
    "Findings indicate that the benefit persisted at the six month follow-up assessment. "
    "We conclude that spaced practice should be adopted in undergraduate curricula."
)


@pytest.fixture(autouse=True)
def logging_run(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Rotate logs at test module boundaries.

    When running with pytest-xdist, each worker uses a separate log
    directory to prevent file corruption from concurrent writes.
    """
    worker_id = os.environ.get("PYTEST_XDIST_WORKER")
    if worker_id:
        os.environ["PAPERLENS_LOG_DIR"] = f"logs/test-{worker_id}"

    test_path = request.node.nodeid.split("::")[0]
    test_name = test_path.replace("/", "-").replace(".py", "")
    start_run(f"test-{test_name}")
    yield
    end_run()


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials out of every test."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_config(**overrides) -> AnalysisConfig:
    """Config that ignores .env, with instant retries unless overridden."""
    fast = RetryPolicy(max_attempts=3, rate_limit_jitter=0, service_jitter=0, network_jitter=0)
    values = {"openai_retry": fast, "gemini_retry": fast}
    values.update(overrides)
    return AnalysisConfig(_env_file=None, **values)


def summary_payload(**overrides) -> dict:
    """A well-formed summary as a provider would return it."""
    payload = {
        "content": "Spaced practice improved recall in a randomized study of 240 participants.",
        "keyPoints": [
            {
                "content": "Spaced practice improved recall",
                "importance": "high",
                "sourceSection": "Results",
                "confidence": 0.9,
            }
        ],
        "limitations": ["Single institution"],
        "citations": [
            {
                "text": "Our results demonstrate a significant improvement in recall",
                "sourceLocation": "Abstract",
                "confidence": 0.9,
            }
        ],
        "confidence": 0.88,
        "ethicsFlags": [],
        "researchGaps": [],
        "xaiData": {
            "decisionPathways": [],
            "sourceReferences": [],
            "confidenceBreakdown": {
                "overall": 0.88,
                "keyPoints": 0.9,
                "citations": 0.85,
                "limitations": 0.7,
            },
            "attentionWeights": [],
        },
    }
    payload.update(overrides)
    return payload


def openai_response(content: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={
            "choices": [{"message": {"role": "assistant", "content": content}}],
            "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
        },
    )


def gemini_response(content: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"candidates": [{"content": {"parts": [{"text": content}]}}]},
    )


def as_json(payload: dict) -> str:
    return json.dumps(payload)


def fresh(template: httpx.Response) -> httpx.Response:
    """A new Response with the template's status, headers and body.

    MockTransport handlers hand out copies so one canned response can
    answer repeated requests.
    """
    return httpx.Response(
        template.status_code, headers=template.headers, content=template.content
    )
