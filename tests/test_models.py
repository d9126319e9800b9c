"""
Tests for the language model providers and the provider factory.
"""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from saas_value.core.errors import ModelOutputInvalid
from saas_value.models.http_model import HttpModel
from saas_value.models.mock_model import MockModel
from saas_value.models.openai_model import OpenAIModel
from saas_value.prompts.valuation import build_valuation_prompt
from saas_value.services.invocation import invoke_model
from saas_value.services.valuation_service import language_model


@pytest.fixture
def prompt(core_metrics):
    return build_valuation_prompt(core_metrics)


def test_http_model_posts_prompt_and_schema(prompt, valuation_reply):
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"output": valuation_reply})

    model = HttpModel("http://gateway.local/", transport=httpx.MockTransport(handler))
    reply = asyncio.run(model.generate(prompt))

    assert reply == valuation_reply
    assert seen["url"] == "http://gateway.local/generate"
    assert seen["body"]["name"] == "valuation_estimation"
    assert seen["body"]["prompt"] == prompt.text
    assert seen["body"]["variables"]["arr"] == 1_000_000
    assert "averageValuation" in seen["body"]["schema"]["properties"]


def test_http_model_without_output_returns_none(prompt):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    assert asyncio.run(HttpModel("http://gateway.local", transport=transport).generate(prompt)) is None


def test_http_model_non_json_body_is_invalid_output(prompt):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="not json"))
    model = HttpModel("http://gateway.local", transport=transport)
    assert asyncio.run(model.generate(prompt)) == "not json"
    with pytest.raises(ModelOutputInvalid) as exc_info:
        asyncio.run(invoke_model(model, prompt, timeout=5))
    assert exc_info.value.violations[0].field == "(root)"


def test_http_model_raises_on_server_error(prompt):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(HttpModel("http://gateway.local", transport=transport).generate(prompt))


def _completion(content):
    message = SimpleNamespace(content=content)
    usage = SimpleNamespace(prompt_tokens=100, completion_tokens=50)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


def test_openai_model_sends_json_mode_request(prompt):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion('{"a": 1}'))
    model = OpenAIModel(client=client, model="gpt-test")

    reply = asyncio.run(model.generate(prompt))

    assert reply == '{"a": 1}'
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["response_format"] == {"type": "json_object"}
    system, user = kwargs["messages"]
    assert user == {"role": "user", "content": prompt.text}
    assert '"impliedARRMultiple"' in system["content"]


def test_openai_model_no_choices_is_none(prompt):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[], usage=None))
    assert asyncio.run(OpenAIModel(client=client, model="gpt-test").generate(prompt)) is None


def test_openai_model_requires_api_key():
    with patch("saas_value.models.openai_model.settings.OPENAI_API_KEY", None):
        with pytest.raises(RuntimeError):
            OpenAIModel()


def test_factory_defaults_to_mock():
    assert isinstance(language_model(), MockModel)


def test_factory_http_requires_base_url():
    with patch("saas_value.services.valuation_service.settings.MODEL_PROVIDER", "http"), \
         patch("saas_value.services.valuation_service.settings.MODEL_BASE_URL", None):
        with pytest.raises(RuntimeError):
            language_model()


def test_factory_http():
    with patch("saas_value.services.valuation_service.settings.MODEL_PROVIDER", "http"), \
         patch("saas_value.services.valuation_service.settings.MODEL_BASE_URL", "http://gw"):
        model = language_model()
    assert isinstance(model, HttpModel)
    assert model.base_url == "http://gw"
