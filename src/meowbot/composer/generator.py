"""The composer: one generation call, decoded or replaced by a fallback."""

import logging

from ..context.request import GenerationRequest
from ..errors import ReplyDecodeError
from ..llm import LLMClient
from ..logging import get_logger
from .decoder import decode_reply
from .fallback import fallback_reply
from .models import Composition

logger = logging.getLogger(__name__)


class Composer:
    """Turns a GenerationRequest into reply segments and a memory update.

    There is a single generation attempt per call. Transport failures
    (GenerationError) propagate; malformed output degrades to the
    deterministic fallback.
    """

    def __init__(self, llm: LLMClient) -> None:
        self.llm = llm

    async def compose(self, request: GenerationRequest) -> Composition:
        raw = await self.llm.complete(
            request.prompt,
            system=request.system,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )

        try:
            reply = decode_reply(raw)
        except ReplyDecodeError as e:
            logger.warning(f"Falling back after undecodable generation output: {e}")
            get_logger().log(
                "generation_fallback",
                fallback=True,
                error=str(e),
                raw_length=len(raw),
            )
            return Composition(
                reply=fallback_reply(request.fallback_seed, request.fallback_segments),
                used_fallback=True,
                raw=raw,
                error=str(e),
            )

        return Composition(reply=reply, raw=raw)
