"""Unit tests for LLM clients."""

import io
import json

import pytest
from botocore.exceptions import ClientError

from promptdocs.core.config import LLMConfig
from promptdocs.llm import (
    BedrockClient,
    MockLLMClient,
    EchoLLMClient,
    LLMResponse,
    create_client,
)


class FakeBedrockRuntime:
    """Stands in for a boto3 bedrock-runtime client."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def invoke_model(self, **kwargs):
        self.requests.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return {"body": io.BytesIO(json.dumps(outcome).encode("utf-8"))}

    def invoke_model_with_response_stream(self, **kwargs):
        self.requests.append(kwargs)
        events = [
            {"type": "message_start"},
            {"type": "content_block_delta", "delta": {"text": "# Doc"}},
            {"type": "content_block_delta", "delta": {"text": "\nBody"}},
            {"type": "message_stop"},
        ]
        return {"body": [{"chunk": {"bytes": json.dumps(e).encode("utf-8")}} for e in events]}


def throttled():
    return ClientError({"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "InvokeModel")


def answer(text, stop_reason="end_turn"):
    return {
        "content": [{"type": "text", "text": text}],
        "usage": {"input_tokens": 10, "output_tokens": 5},
        "stop_reason": stop_reason,
    }


class TestLLMResponse:
    """Tests for LLMResponse."""

    def test_error(self):
        response = LLMResponse.error("boom")
        assert response.success is False
        assert response.content == ""

    def test_token_usage(self):
        response = LLMResponse(content="x", input_tokens=3, output_tokens=4)
        assert response.token_usage == {"input_tokens": 3, "output_tokens": 4, "total_tokens": 7}

    def test_total_tokens_unknown(self):
        assert LLMResponse(content="x").total_tokens is None

    def test_truncated(self):
        assert LLMResponse(content="x", finish_reason="max_tokens").truncated is True


class TestBedrockClient:
    """Tests for BedrockClient against a fake runtime."""

    @pytest.fixture
    def config(self):
        return LLMConfig(model="test-model", max_retries=2, retry_delay=0.0)

    def test_sends_prompt_verbatim(self, config):
        runtime = FakeBedrockRuntime([answer("# Generated")])
        client = BedrockClient(config=config, client=runtime)

        prompt = "# Prompt\n\n  Keep   spacing.\n"
        response = client.generate(prompt, system_prompt="Be brief")

        body = json.loads(runtime.requests[0]["body"])
        assert body["messages"] == [{"role": "user", "content": prompt}]
        assert body["system"] == "Be brief"
        assert runtime.requests[0]["modelId"] == "test-model"
        assert response.success is True
        assert response.content == "# Generated"
        assert response.total_tokens == 15

    def test_retries_on_throttling(self, config):
        runtime = FakeBedrockRuntime([throttled(), answer("ok")])
        client = BedrockClient(config=config, client=runtime)

        response = client.generate("prompt")
        assert response.success is True
        assert len(runtime.requests) == 2

    def test_gives_up_after_max_retries(self, config):
        runtime = FakeBedrockRuntime([throttled(), throttled(), throttled()])
        client = BedrockClient(config=config, client=runtime)

        response = client.generate("prompt")
        assert response.success is False
        assert "ThrottlingException" in response.error_message
        assert len(runtime.requests) == 3

    def test_other_client_error_is_not_retried(self, config):
        denied = ClientError({"Error": {"Code": "AccessDeniedException", "Message": "no"}}, "InvokeModel")
        runtime = FakeBedrockRuntime([denied])
        response = BedrockClient(config=config, client=runtime).generate("prompt")
        assert response.success is False
        assert len(runtime.requests) == 1

    def test_empty_content_is_error(self, config):
        runtime = FakeBedrockRuntime([{"content": [], "stop_reason": "end_turn"}])
        response = BedrockClient(config=config, client=runtime).generate("prompt")
        assert response.success is False

    def test_stream(self, config):
        runtime = FakeBedrockRuntime([])
        client = BedrockClient(config=config, client=runtime)
        assert "".join(client.generate_stream("prompt")) == "# Doc\nBody"

    def test_is_available(self, config):
        runtime = FakeBedrockRuntime([answer("pong")])
        assert BedrockClient(config=config, client=runtime).is_available() is True


class TestBedrockClientCredentials:
    """Tests for how BedrockClient builds its boto3 client."""

    @pytest.fixture
    def created(self, monkeypatch):
        calls = []

        def fake_client(service_name, **kwargs):
            calls.append((service_name, kwargs))
            return object()

        monkeypatch.setattr("promptdocs.llm.bedrock_client.boto3.client", fake_client)
        for name in ("AWS_BEARER_TOKEN_BEDROCK", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"):
            monkeypatch.delenv(name, raising=False)
        return calls

    def test_bearer_token_left_to_botocore(self, created, monkeypatch):
        monkeypatch.setenv("AWS_BEARER_TOKEN_BEDROCK", "token")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        BedrockClient(config=LLMConfig(aws_region="us-west-2")).client

        service_name, kwargs = created[0]
        assert service_name == "bedrock-runtime"
        assert kwargs["region_name"] == "us-west-2"
        assert "aws_session_token" not in kwargs
        assert "aws_access_key_id" not in kwargs

    def test_access_keys(self, created, monkeypatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        BedrockClient(config=LLMConfig()).client
        assert created[0][1]["aws_access_key_id"] == "AKIA"

    def test_botocore_makes_single_attempt(self, created):
        BedrockClient(config=LLMConfig(max_retries=5)).client
        boto_config = created[0][1]["config"]
        assert boto_config.retries["total_max_attempts"] == 1


class TestMockLLMClient:
    """Tests for MockLLMClient."""

    def test_default_response(self):
        client = MockLLMClient(default_response="doc")
        assert client.generate("prompt").content == "doc"

    def test_response_sequence_cycles(self):
        client = MockLLMClient()
        client.set_responses(["a", "b"])
        assert [client.generate("p").content for _ in range(3)] == ["a", "b", "a"]

    def test_tracks_calls(self):
        client = MockLLMClient()
        client.generate("prompt text", system_prompt="sys")
        assert client.call_count == 1
        assert client.last_call["prompt"] == "prompt text"
        assert client.last_call["system_prompt"] == "sys"

    def test_error_after(self):
        client = MockLLMClient()
        client.set_error_after(1)
        assert client.generate("p").success is True
        assert client.generate("p").success is False

    def test_stream_rejoins_to_content(self):
        client = MockLLMClient(default_response="line one\nline two\n")
        assert "".join(client.generate_stream("p")) == "line one\nline two\n"


class TestEchoLLMClient:
    """Tests for EchoLLMClient."""

    def test_returns_prompt(self):
        prompt = "# Title\n\nExact   text\n"
        response = EchoLLMClient().generate(prompt)
        assert response.content == prompt
        assert response.model_id == "echo"


class TestCreateClient:
    """Tests for create_client."""

    def test_mock(self):
        assert isinstance(create_client("mock"), MockLLMClient)

    def test_echo(self):
        assert isinstance(create_client("echo"), EchoLLMClient)

    def test_bedrock_uses_config(self):
        client = create_client("bedrock", config=LLMConfig(model="m"))
        assert isinstance(client, BedrockClient)
        assert client.model_id == "m"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_client("openai")
