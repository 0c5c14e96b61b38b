"""
Use case: Answer a question about the user's finances.

Pipeline (strictly sequential, each step gates the next):
    1. append the user's message to the transcript
    2. fetch the financial summary for the account
    3. enrich the prompt with the summary as hidden context
    4. relay to the inference endpoint and append the reply
    5. clear the pending input and the in-flight flag

Any failure in steps 2-4 short-circuits to the generic fallback reply,
so every posted question gets exactly one answer. Questions are served
one at a time in submission order; a question asked while another is in
flight waits for it, which keeps questions and answers interleaved.
"""

import asyncio
import itertools
import json
import logging
from typing import Any, Optional

from finfusion.application.wallet.dtos import AssistantReply, ChatTopic
from finfusion.application.wallet.validation import require_text
from finfusion.domain.wallet.entities import ChatMessage, Sender
from finfusion.domain.wallet.errors import OperationError
from finfusion.domain.wallet.ports import AssistantRelayPort, LedgerPort

logger = logging.getLogger(__name__)

GREETING = "Hello, how can I help you?"
FALLBACK_REPLY = "Sorry, there was an error processing your request."
CONTEXT_HEADER = (
    "Context: the user's current financial summary as JSON. "
    "Use it to answer; do not repeat it verbatim."
)


class ConversationState:
    """Append-only transcript of one assistant conversation.

    Owned by a single chat screen; never shared between sessions.
    """

    def __init__(self, greeting: Optional[str] = GREETING) -> None:
        self._messages: list[ChatMessage] = []
        self._ids = itertools.count(1)
        self.pending_input = ""
        self.awaiting_response = False
        if greeting:
            self.append(Sender.ASSISTANT, greeting)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, sender: Sender, text: str) -> ChatMessage:
        message = ChatMessage(id=next(self._ids), sender=sender, text=text)
        self._messages.append(message)
        return message


def enrich_prompt(user_text: str, summary: dict[str, Any]) -> str:
    """Combine the user's literal question with the serialized summary."""
    context = json.dumps(summary, sort_keys=True, default=str)
    return f"{user_text}\n\n{CONTEXT_HEADER}\n{context}"


class ContextAssembler:
    """Runs the fetch-enrich-relay-record pipeline for one conversation."""

    def __init__(
        self,
        conversation: ConversationState,
        ledger: LedgerPort,
        relay: AssistantRelayPort,
    ) -> None:
        self._conversation = conversation
        self._ledger = ledger
        self._relay = relay
        self._gate = asyncio.Lock()

    @property
    def conversation(self) -> ConversationState:
        return self._conversation

    async def ask(self, user_text: str, account_id: str) -> AssistantReply:
        """Post a question and wait for its reply.

        Raises:
            ValidationError: If the question is empty. Nothing is appended.
        """
        text = require_text(user_text, "text", "a message")
        return await self._run(text, account_id, extra_context=None)

    async def ask_about(self, topic: ChatTopic, account_id: str) -> AssistantReply:
        """Ask about a specific subject, e.g. a holding picked on screen."""
        text = f"Tell me about {topic.label}."
        return await self._run(text, account_id, extra_context=topic.details)

    async def submit_pending(self, account_id: str) -> AssistantReply:
        """Ask whatever is currently in the input field."""
        return await self.ask(self._conversation.pending_input, account_id)

    async def _run(
        self,
        text: str,
        account_id: str,
        extra_context: Optional[dict[str, Any]],
    ) -> AssistantReply:
        async with self._gate:
            conversation = self._conversation
            conversation.awaiting_response = True
            question = conversation.append(Sender.USER, text)
            answer: Optional[str] = None
            try:
                answer = await self._answer(text, account_id, extra_context)
            finally:
                fallback = not answer
                reply = conversation.append(
                    Sender.ASSISTANT, answer if answer else FALLBACK_REPLY
                )
                conversation.pending_input = ""
                conversation.awaiting_response = False
        return AssistantReply(question=question, reply=reply, fallback=fallback)

    async def _answer(
        self,
        text: str,
        account_id: str,
        extra_context: Optional[dict[str, Any]],
    ) -> Optional[str]:
        """Return the assistant's text, or None if any step failed."""
        try:
            summary = await self._ledger.fetch_financial_summary(account_id)
        except OperationError as exc:
            logger.warning(
                "Financial summary unavailable (%s): %s", exc.kind.value, exc.message
            )
            return None

        if extra_context:
            summary = {**summary, "topic": extra_context}

        try:
            return await self._relay.relay_to_assistant(enrich_prompt(text, summary))
        except OperationError as exc:
            logger.warning("Assistant relay failed (%s): %s", exc.kind.value, exc.message)
            return None
