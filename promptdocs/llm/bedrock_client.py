"""
AWS Bedrock client - sends prompt text to Claude models on Bedrock.
"""

import os
import json
import time
from typing import Optional, Iterator, Dict, Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from .base import BaseLLMClient, LLMResponse
from ..core.config import LLMConfig
from ..utils.logger import get_logger

logger = get_logger(__name__)

ANTHROPIC_VERSION = "bedrock-2023-05-31"
RETRYABLE_ERROR_CODES = {"ThrottlingException", "ServiceUnavailableException"}


class BedrockClient(BaseLLMClient):
    """
    AWS Bedrock client for Claude models.

    Supports authentication via:
    1. Bearer token (AWS_BEARER_TOKEN_BEDROCK)
    2. Access key + secret (AWS_ACCESS_KEY_ID + AWS_SECRET_ACCESS_KEY)
    3. Default AWS credential chain (IAM role, SSO, etc.)
    """

    def __init__(self, config: Optional[LLMConfig] = None, client=None):
        """
        Initialize the Bedrock client.

        Args:
            config: LLM configuration (model, region, retries)
            client: Pre-built bedrock-runtime client, mostly for tests
        """
        super().__init__(config)
        self._client = client

    @property
    def provider_name(self) -> str:
        return "bedrock"

    @property
    def region(self) -> str:
        return self.config.aws_region

    @property
    def client(self):
        """Lazy-load the bedrock-runtime client."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Create a bedrock-runtime client, picking the first available credentials."""
        bearer_token = os.getenv("AWS_BEARER_TOKEN_BEDROCK")
        access_key = os.getenv("AWS_ACCESS_KEY_ID")
        secret_key = os.getenv("AWS_SECRET_ACCESS_KEY")

        # generate() owns retries; botocore makes a single attempt.
        boto_config = Config(
            connect_timeout=30,
            read_timeout=self.config.timeout,
            retries={'total_max_attempts': 1, 'mode': 'standard'}
        )

        if bearer_token:
            # botocore picks AWS_BEARER_TOKEN_BEDROCK up from the environment
            # and sends it as an Authorization: Bearer header.
            logger.debug("Using bearer token authentication")
            return boto3.client("bedrock-runtime", region_name=self.region, config=boto_config)

        if access_key and secret_key:
            logger.debug("Using access key authentication")
            return boto3.client(
                "bedrock-runtime",
                region_name=self.region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                config=boto_config,
            )

        logger.debug("Using default AWS credential chain")
        return boto3.client("bedrock-runtime", region_name=self.region, config=boto_config)

    def _build_request(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            body["system"] = system_prompt
        return body

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send the prompt to Claude via Bedrock and return the generated document.

        Throttling is retried with a linear backoff; any other AWS or
        decoding failure is returned as an error response.
        """
        model_id = kwargs.get('model_id', self.config.model)
        request_body = self._build_request(
            prompt,
            system_prompt,
            temperature=kwargs.get('temperature', self.config.temperature),
            max_tokens=kwargs.get('max_tokens', self.config.max_tokens),
        )

        last_error = None
        for attempt in range(self.config.max_retries + 1):
            try:
                logger.debug(f"Invoking model {model_id} (attempt {attempt + 1})")

                response = self.client.invoke_model(
                    modelId=model_id,
                    contentType="application/json",
                    accept="application/json",
                    body=json.dumps(request_body)
                )
                response_body = json.loads(response["body"].read())

            except ClientError as e:
                error_code = e.response.get('Error', {}).get('Code', 'Unknown')
                error_message = e.response.get('Error', {}).get('Message', str(e))
                last_error = f"AWS error ({error_code}): {error_message}"

                if error_code in RETRYABLE_ERROR_CODES and attempt < self.config.max_retries:
                    delay = self.config.retry_delay * (attempt + 1)
                    logger.warning(f"{error_code}, retrying in {delay}s...")
                    time.sleep(delay)
                    continue

                logger.error(last_error)
                break

            except BotoCoreError as e:
                last_error = f"AWS connection error: {e}"
                logger.error(last_error)
                break

            except json.JSONDecodeError as e:
                last_error = f"Failed to parse response: {e}"
                logger.error(last_error)
                break

            return self._to_response(response_body, model_id)

        return LLMResponse.error(last_error or "Unknown error")

    def _to_response(self, body: Dict[str, Any], model_id: str) -> LLMResponse:
        blocks = body.get("content") or []
        text = "".join(b.get("text", "") for b in blocks if b.get("type", "text") == "text")
        if not text:
            return LLMResponse.error("Empty response from model")

        usage = body.get("usage", {})
        return LLMResponse(
            content=text,
            success=True,
            input_tokens=usage.get("input_tokens"),
            output_tokens=usage.get("output_tokens"),
            model_id=model_id,
            finish_reason=body.get("stop_reason"),
            raw_response=body,
        )

    def generate_stream(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> Iterator[str]:
        """Stream the generated document from Bedrock chunk by chunk."""
        model_id = kwargs.get('model_id', self.config.model)
        request_body = self._build_request(
            prompt,
            system_prompt,
            temperature=kwargs.get('temperature', self.config.temperature),
            max_tokens=kwargs.get('max_tokens', self.config.max_tokens),
        )

        try:
            response = self.client.invoke_model_with_response_stream(
                modelId=model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(request_body)
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Streaming error: {type(e).__name__}: {e}")
            raise

        for event in response["body"]:
            chunk = json.loads(event["chunk"]["bytes"])
            if chunk.get("type") == "content_block_delta":
                delta = chunk.get("delta", {})
                if "text" in delta:
                    yield delta["text"]

    def is_available(self) -> bool:
        """Send a one-token request to verify credentials and model access."""
        try:
            self.client.invoke_model(
                modelId=self.config.model,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(self._build_request("ping", None, temperature=0.0, max_tokens=1)),
            )
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Bedrock availability check failed: {e}")
            return False
