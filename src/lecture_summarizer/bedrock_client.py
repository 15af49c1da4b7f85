"""Single round-trip calls to a Bedrock-hosted Anthropic model."""

import asyncio
import logging
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from lecture_summarizer.config import Config
from lecture_summarizer.models.api_schemas import SummaryRequestPayload

config = Config()
log = logging.getLogger(__name__)


class BedrockInvoker:
    """Sends a request payload to ``invoke_model`` and returns the raw body.

    No retries and no streaming. The boto3 client carries no per-call state
    and may be shared between concurrent jobs.
    """

    def __init__(self, client: Any = None, model_id: Optional[str] = None) -> None:
        self._client = client
        self.model_id = model_id or config.MODEL_ID

    @property
    def client(self) -> Any:
        return self._client if self._client is not None else config.client

    def invoke(self, payload: SummaryRequestPayload) -> bytes:
        body = payload.to_wire()
        log.debug(
            f"Invoking {self.model_id}: {len(payload.content)} content blocks, "
            f"{len(body)} bytes, max_tokens={payload.max_tokens}"
        )
        try:
            response = self.client.invoke_model(
                modelId=self.model_id,
                body=body.encode("utf-8"),
                contentType="application/json",
                accept="application/json",
            )
            return response["body"].read()
        except ClientError as e:
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            code = e.response.get("Error", {}).get("Code", "Unknown")
            log.error(f"❌ Bedrock error {status} ({code}) for model {self.model_id}")
            raise RuntimeError(f"Model invocation failed with status {status}") from e
        except BotoCoreError as e:
            log.error(f"❌ Bedrock transport error: {e}")
            raise RuntimeError("Model endpoint unreachable") from e

    async def invoke_async(self, payload: SummaryRequestPayload) -> bytes:
        return await asyncio.to_thread(self.invoke, payload)
