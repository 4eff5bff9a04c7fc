import io
import json
from types import SimpleNamespace
from typing import Any

import ollama
import pytest
from botocore.exceptions import ClientError

from ltb.errors import EmptyResponseError, TransportError
from ltb.llm import BedrockGateway, OllamaGateway, OpenAIGateway
from ltb.llm.bedrock_client import build_request_body
from ltb.llm.openai_client import OPENAI_DEFAULT_BASE_URL, _normalize_provider_url
from ltb.llm_client import DEFAULT_SAMPLING


class _FakeBedrockClient:
    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self._payload = payload
        self._error = error
        self.requests: list[dict[str, Any]] = []

    def invoke_model(self, **kwargs: Any) -> dict[str, Any]:
        self.requests.append(kwargs)
        if self._error is not None:
            raise self._error
        return {"body": io.BytesIO(json.dumps(self._payload).encode("utf-8"))}


def test_gw_001_bedrock_sends_messages_body_and_returns_first_text_block() -> None:
    client = _FakeBedrockClient(
        payload={
            "content": [
                {"type": "text", "text": '{"objectName": "A"}'},
                {"type": "text", "text": "ignored"},
            ],
            "usage": {"input_tokens": 10, "output_tokens": 5},
        }
    )
    gateway = BedrockGateway(region="eu-west-1", client=client)

    reply = gateway.complete("Prompt text", max_tokens=1234, model_id="anthropic.model")

    assert reply == '{"objectName": "A"}'
    request = client.requests[0]
    assert request["modelId"] == "anthropic.model"
    assert request["contentType"] == "application/json"
    body = json.loads(request["body"])
    assert body == build_request_body("Prompt text", 1234, DEFAULT_SAMPLING)
    assert body["anthropic_version"] == "bedrock-2023-05-31"
    assert body["max_tokens"] == 1234
    assert body["messages"][0]["content"][0]["text"] == "Prompt text"


def test_gw_002_bedrock_zero_content_blocks_raise_empty_response() -> None:
    gateway = BedrockGateway(client=_FakeBedrockClient(payload={"content": []}))

    with pytest.raises(EmptyResponseError):
        gateway.complete("p", max_tokens=10, model_id="m")


def test_gw_003_bedrock_client_error_becomes_transport_error() -> None:
    error = ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
        "InvokeModel",
    )
    gateway = BedrockGateway(client=_FakeBedrockClient(error=error))

    with pytest.raises(TransportError) as exc_info:
        gateway.complete("p", max_tokens=10, model_id="m")

    assert exc_info.value.__cause__ is error
    assert exc_info.value.stage == "replied"


def test_gw_004_openai_forwards_sampling_and_returns_output_text() -> None:
    calls: list[dict[str, Any]] = []

    def _create(**kwargs: Any) -> SimpleNamespace:
        calls.append(kwargs)
        return SimpleNamespace(output_text="reply")

    client = SimpleNamespace(responses=SimpleNamespace(create=_create))
    gateway = OpenAIGateway(provider_url="openai", client=client)  # type: ignore[arg-type]

    assert gateway.complete("p", max_tokens=99, model_id="gpt-x") == "reply"
    assert calls == [
        {
            "model": "gpt-x",
            "input": "p",
            "max_output_tokens": 99,
            "temperature": DEFAULT_SAMPLING.temperature,
            "top_p": DEFAULT_SAMPLING.top_p,
        }
    ]


def test_gw_005_openai_failures_map_to_gateway_errors() -> None:
    def _fail(**kwargs: Any) -> None:
        raise OSError("network down")

    failing = OpenAIGateway(
        provider_url="openai",
        client=SimpleNamespace(responses=SimpleNamespace(create=_fail)),  # type: ignore[arg-type]
    )
    empty = OpenAIGateway(
        provider_url="openai",
        client=SimpleNamespace(  # type: ignore[arg-type]
            responses=SimpleNamespace(
                create=lambda **_: SimpleNamespace(output=[], output_text="")
            )
        ),
    )

    with pytest.raises(TransportError):
        failing.complete("p", max_tokens=1, model_id="m")
    with pytest.raises(EmptyResponseError):
        empty.complete("p", max_tokens=1, model_id="m")


def test_gw_006_openai_provider_url_aliases_normalize() -> None:
    assert _normalize_provider_url("api.openai.com/") == OPENAI_DEFAULT_BASE_URL
    assert _normalize_provider_url("") == OPENAI_DEFAULT_BASE_URL
    assert _normalize_provider_url("localhost:8000/v1") == "https://localhost:8000/v1"


class _FakeOllamaClient:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.calls: list[dict[str, Any]] = []

    def generate(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return self._response


def test_gw_007_ollama_passes_max_tokens_as_num_predict() -> None:
    client = _FakeOllamaClient(response={"response": "reply"})
    gateway = OllamaGateway(client=client)  # type: ignore[arg-type]

    assert gateway.complete("p", max_tokens=77, model_id="qwen") == "reply"
    call = client.calls[0]
    assert call["model"] == "qwen"
    assert call["stream"] is False
    assert call["options"]["num_predict"] == 77
    assert call["options"]["top_k"] == DEFAULT_SAMPLING.top_k


def test_gw_008_ollama_failures_map_to_gateway_errors() -> None:
    failing = OllamaGateway(
        client=_FakeOllamaClient(error=ollama.ResponseError("model not found", 404))  # type: ignore[arg-type]
    )
    empty = OllamaGateway(client=_FakeOllamaClient(response={"done": True}))  # type: ignore[arg-type]

    with pytest.raises(TransportError):
        failing.complete("p", max_tokens=1, model_id="m")
    with pytest.raises(EmptyResponseError):
        empty.complete("p", max_tokens=1, model_id="m")


def test_gw_009_empty_reply_text_is_returned_by_every_gateway() -> None:
    bedrock = BedrockGateway(
        client=_FakeBedrockClient(payload={"content": [{"type": "text", "text": ""}]})
    )
    openai_gateway = OpenAIGateway(
        provider_url="openai",
        client=SimpleNamespace(  # type: ignore[arg-type]
            responses=SimpleNamespace(
                create=lambda **_: SimpleNamespace(
                    output=[SimpleNamespace(type="message")], output_text=""
                )
            )
        ),
    )
    ollama_gateway = OllamaGateway(
        client=_FakeOllamaClient(response={"response": ""})  # type: ignore[arg-type]
    )

    for gateway in (bedrock, openai_gateway, ollama_gateway):
        assert gateway.complete("p", max_tokens=1, model_id="m") == ""


class _RawBodyBedrockClient:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def invoke_model(self, **kwargs: Any) -> dict[str, Any]:
        return {"body": io.BytesIO(self._body)}


def test_gw_010_bedrock_deeply_nested_body_becomes_transport_error() -> None:
    depth = 100_000
    body = ('{"content": ' + "[" * depth + "]" * depth + "}").encode("utf-8")
    gateway = BedrockGateway(client=_RawBodyBedrockClient(body))

    with pytest.raises(TransportError):
        gateway.complete("p", max_tokens=1, model_id="m")
