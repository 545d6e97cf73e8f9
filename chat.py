"""
Conference assistant chat over the scraped speaker list.

``ChatResponder`` sends a fixed system prompt (with the whole speaker
context embedded) plus the user's latest message to the OpenAI chat
completions API.  ``ChatSession`` keeps the visible conversation and
turns any service failure into an apology turn, so a failed request
never loses earlier messages.

Usage:
    python chat.py                 # interactive terminal chat

Environment variables:
    OPENAI_API_KEY=...             # required unless CHAT_DEBUG=true
    CHAT_MODEL=gpt-4o-mini
    SPEAKERS_PATH=speakers.json
    CHAT_DEBUG=true                # canned answers, no API calls
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from dotenv import load_dotenv
from openai import OpenAI

from context_builder import load_speakers_context

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
TEMPERATURE = 0.7
MAX_TOKENS = 800

GREETING = (
    "Hello! I'm here to help you decide if you should attend the conference. "
    "Ask me about specific topics, industries, or expertise you're interested in, "
    "and I'll recommend speakers who might be relevant to you!"
)
EMPTY_COMPLETION = "I apologize, but I could not generate a response."
ERROR_REPLY = (
    "I apologize, but I encountered an error processing your request. "
    "Please try again."
)

SYSTEM_PROMPT_TEMPLATE = """You are a helpful assistant for a conference. Based on the user's question and interests, you should recommend whether they should attend the conference by analyzing the speakers present.

Here are ALL the speakers at the conference:

{context}

Your task:
1. Analyze the user's interests and questions
2. Identify which speakers are most relevant to their interests
3. Provide a helpful, enthusiastic recommendation about attending the conference
4. Be specific about which speakers they should check out and why
5. If their interests don't align well with the speakers, be honest but helpful

Keep your response conversational and friendly."""


def build_system_prompt(context: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(context=context)


class ChatResponder:
    """Single-turn completion against the speaker context.

    Raises on service errors; callers decide how to present them.
    """

    def __init__(
        self,
        context: str,
        *,
        client: Any | None = None,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = TEMPERATURE,
        max_tokens: int = MAX_TOKENS,
        debug: bool = False,
    ) -> None:
        self.has_context = bool(context)
        if not self.has_context:
            logger.warning("Speaker context is empty; every reply will be an apology")
        self.system_prompt = build_system_prompt(context)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.debug = debug

        if client is None and not debug:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError(
                    "OpenAI API key not configured. Set OPENAI_API_KEY environment variable."
                )
            client = OpenAI(api_key=api_key)
        self.client = client

    def respond(self, user_message: str) -> str:
        if self.debug:
            return (
                "**Test Response** (Debug Mode)\n\n"
                f'You asked: "{user_message}"\n\n'
                "(Unset CHAT_DEBUG to use the real API.)"
            )
        if not self.has_context:
            return ERROR_REPLY

        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": user_message},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        content = completion.choices[0].message.content
        if not content:
            return EMPTY_COMPLETION

        usage = completion.usage
        if usage:
            logger.info(
                "Chat completion: model=%s input_tokens=%d output_tokens=%d",
                self.model, usage.prompt_tokens, usage.completion_tokens,
            )
        return content


@dataclass
class ChatMessage:
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)


class ChatSession:
    """Conversation state for one user.

    Only the latest user message is sent to the model; the history is
    for display.
    """

    def __init__(self, responder: ChatResponder) -> None:
        self.responder = responder
        self.messages: list[ChatMessage] = [ChatMessage("assistant", GREETING)]

    def send(self, text: str) -> ChatMessage | None:
        """Record *text* as a user turn and append the assistant's reply.

        Blank input is ignored and returns ``None``.
        """
        if not text.strip():
            return None
        self.messages.append(ChatMessage("user", text))
        try:
            reply = self.responder.respond(text)
        except Exception:
            logger.error("Error getting chat response", exc_info=True)
            reply = ERROR_REPLY
        message = ChatMessage("assistant", reply)
        self.messages.append(message)
        return message


def _print_message(message: ChatMessage) -> None:
    stamp = message.timestamp.strftime("%H:%M:%S")
    label = "You" if message.role == "user" else "Assistant"
    print(f"\n[{stamp}] {label}:\n{message.content}", flush=True)


def main() -> int:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    speakers_path = os.getenv("SPEAKERS_PATH", "speakers.json")
    debug = os.getenv("CHAT_DEBUG", "false").lower() == "true"

    try:
        context = load_speakers_context(speakers_path)
        responder = ChatResponder(
            context,
            model=os.getenv("CHAT_MODEL", DEFAULT_MODEL),
            debug=debug,
        )
    except (OSError, ValueError) as exc:
        logger.error("Cannot start chat: %s", exc)
        return 1

    session = ChatSession(responder)
    print("Conference Assistant — Ctrl-D to quit", flush=True)
    _print_message(session.messages[0])

    while True:
        try:
            text = input("\n> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        reply = session.send(text)
        if reply is not None:
            _print_message(reply)


if __name__ == "__main__":
    sys.exit(main())
