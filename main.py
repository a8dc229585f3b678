"""Hub Engine - web-grounded chat assistant

Simple CLI for asking questions with web-retrieved context, or serving the API.
"""

import argparse
import asyncio
import math
import shutil
import sys
from typing import TextIO

from hub_engine.config import settings
from hub_engine.models.conversation import ChatSession
from hub_engine.services.context_pipeline import ContextPipeline
from hub_engine.services.service_context import ServiceContext

ASSISTANT_PREFIX = "Assistant: "


def discard_partial_answer(partial: str, stream: TextIO | None = None) -> None:
    """Remove the assistant line and any partially streamed answer before an error.

    On a terminal the answer lines are erased in place. Piped output cannot be
    taken back, so partial text is closed off with a marker instead.
    """
    stream = stream or sys.stdout
    if stream.isatty():
        width = max(shutil.get_terminal_size().columns, 1)
        rows = sum(max(1, math.ceil(len(line) / width)) for line in (ASSISTANT_PREFIX + partial).split("\n"))
        stream.write("\r")
        if rows > 1:
            stream.write(f"\x1b[{rows - 1}A")
        stream.write("\x1b[J")
    elif partial:
        stream.write("\n[partial answer discarded]\n")
    else:
        stream.write("\n")
    stream.flush()


async def ask(pipeline: ContextPipeline, session: ChatSession, question: str, show_context: bool) -> None:
    session.add_user(question)
    answer = ""
    partial = ""

    async for event in pipeline.chat(session.user_texts()):
        event_type = event.event.value
        data = event.data

        if event_type == "context_ready":
            if show_context:
                print(f"[*] Queries: {', '.join(data.get('queries', [])) or '(none)'}")
                for url in data.get("sources", []):
                    print(f"    - {url}")
                print(f"    {data.get('context_chars', 0)} context chars in {data.get('elapsed_ms')}ms")
            print(ASSISTANT_PREFIX, end="", flush=True)

        elif event_type == "answer_delta":
            chunk = data.get("chunk", "")
            partial += chunk
            print(chunk, end="", flush=True)

        elif event_type == "answer_complete":
            answer = data.get("answer", "")
            print()

        elif event_type == "error":
            discard_partial_answer(partial)
            partial = ""
            print(f"[!] {data.get('message')}")

    if answer:
        session.add_assistant(answer)


async def run_chat(query: str | None, model: str | None, show_context: bool) -> None:
    session = ChatSession()
    async with ServiceContext.from_settings(settings) as services:
        pipeline = ContextPipeline(services, model=model)

        if query:
            await ask(pipeline, session, query, show_context)
            return

        print("Type a question. /clear resets the conversation, /quit exits.")
        while True:
            try:
                line = await asyncio.to_thread(input, "You: ")
            except EOFError:
                break
            text = line.strip()
            if not text:
                continue
            if text == "/quit":
                break
            if text == "/clear":
                session.clear()
                print("[*] Conversation cleared.")
                continue
            await ask(pipeline, session, text, show_context)


def main():
    parser = argparse.ArgumentParser(description="Hub Engine chat assistant")
    parser.add_argument("--query", "-q", help="Ask a single question and exit")
    parser.add_argument("--model", "-m", help="Model to use (default: from config)")
    parser.add_argument("--show-context", action="store_true", help="Print queries and sources")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.serve:
        import uvicorn

        uvicorn.run("hub_engine.main:app", host=args.host, port=args.port)
        return

    try:
        asyncio.run(run_chat(args.query, args.model, args.show_context))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
