"""Token counting walkthroughs for the Gemini API.

Each routine builds its own model handle, makes one or more round trips and
prints what came back. None of them depends on another; ``run_all`` just runs
them in order; run a subset with ``python -m genai_tokens <name> ...``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from typing import Any

from genai_tokens.api import (
    Client,
    Content,
    FileDataPart,
    FileProcessingError,
    FunctionDeclaration,
    InlineDataPart,
    TextPart,
    Tool,
)
from genai_tokens.config import Settings

logger = logging.getLogger(__name__)

QUICK_BROWN_FOX = "The quick brown fox jumps over the lazy dog."
CACHE_TTL_SECONDS = 600


def _print_dot(_file: object) -> None:
    sys.stdout.write(".")
    sys.stdout.flush()


def _setup(client: Client | None, settings: Settings | None) -> tuple[Client, Settings]:
    settings = settings or Settings()
    client = client or Client(settings.api_key or None, retry=settings.retry)
    return client, settings


def tokens_text_only(client: Client | None = None, settings: Settings | None = None) -> Any:
    client, settings = _setup(client, settings)
    model = client.generative_model(settings.model)

    # Count tokens in a prompt without calling text generation.
    count = model.count_tokens(QUICK_BROWN_FOX)
    print(count.total_tokens)  # 11
    print(count.prompt_tokens_details)

    # usage_metadata splits input (prompt) and output (candidates) tokens.
    generated = model.generate_content(QUICK_BROWN_FOX)
    print(generated.usage_metadata)
    return count, generated


def tokens_chat(client: Client | None = None, settings: Settings | None = None) -> Any:
    client, settings = _setup(client, settings)
    model = client.generative_model(settings.model)

    chat = model.start_chat(
        history=[
            Content(role="user", parts=(TextPart("Hi my name is Bob"),)),
            Content(role="model", parts=(TextPart("Hi Bob!"),)),
        ]
    )
    count = model.count_tokens(chat.get_history())
    print(count.total_tokens)  # 10

    reply = chat.send_message("In one sentence, explain how a computer works to a young child.")
    print(reply.usage_metadata)
    return count, reply


def tokens_multimodal_image_inline(
    client: Client | None = None, settings: Settings | None = None
) -> Any:
    client, settings = _setup(client, settings)
    model = client.generative_model(settings.model)

    image = InlineDataPart.from_path(settings.media_dir / "jetpack.jpg", "image/jpeg")
    prompt = "Tell me about this image."

    # An image's display or file size does not affect its token count.
    count = model.count_tokens([prompt, image])
    print(count.total_tokens)  # 265

    generated = model.generate_content([prompt, image])
    print(generated.usage_metadata)
    return count, generated


def tokens_multimodal_image_file_api(
    client: Client | None = None, settings: Settings | None = None
) -> Any:
    client, settings = _setup(client, settings)
    uploaded = client.files.upload_file(settings.media_dir / "jetpack.jpg", mime_type="image/jpeg")
    try:
        model = client.generative_model(settings.model)
        image = FileDataPart.from_file(uploaded)
        prompt = "Tell me about this image."

        count = model.count_tokens([prompt, image])
        print(count.total_tokens)  # 265

        generated = model.generate_content([prompt, image])
        print(generated.usage_metadata)
    finally:
        client.files.delete_file(uploaded.name)
    return count, generated


def tokens_multimodal_video_audio_file_api(
    client: Client | None = None, settings: Settings | None = None
) -> Any:
    client, settings = _setup(client, settings)
    uploaded = client.files.upload_file(
        settings.media_dir / "Big_Buck_Bunny.mp4", mime_type="video/mp4"
    )
    try:
        sys.stdout.write("processing video")
        sys.stdout.flush()
        try:
            client.files.wait_for_active(
                uploaded.name,
                poll_interval=settings.poll_interval,
                on_poll=_print_dot,
            )
        except FileProcessingError as exc:
            raise FileProcessingError(exc.file, "Video processing failed.") from exc
        sys.stdout.write("\n")

        model = client.generative_model(settings.model)
        video = FileDataPart.from_file(uploaded)
        prompt = "Tell me about this video."

        # A video or audio file's display or file size does not affect its token count.
        count = model.count_tokens([prompt, video])
        print(count.total_tokens)  # 302

        generated = model.generate_content([prompt, video])
        print(generated.usage_metadata)
    finally:
        client.files.delete_file(uploaded.name)
    return count, generated


def tokens_cached_content(client: Client | None = None, settings: Settings | None = None) -> Any:
    client, settings = _setup(client, settings)
    uploaded = client.files.upload_file(settings.media_dir / "a11.txt", mime_type="text/plain")
    try:
        cache = client.caches.create(
            settings.cache_model,
            [
                Content(role="user", parts=(TextPart("Here's the Apollo 11 transcript:"),)),
                Content(role="user", parts=(FileDataPart.from_file(uploaded),)),
            ],
            ttl_seconds=CACHE_TTL_SECONDS,
        )
        try:
            model = client.model_from_cache(cache)
            prompt = "Please give a short summary of this file."

            count = model.count_tokens(prompt)
            print(count.total_tokens)  # 10

            generated = model.generate_content(prompt)
            # cached_content_token_count reports the tokens served from the cache.
            print(generated.usage_metadata)
        finally:
            client.caches.delete(cache.name)
    finally:
        client.files.delete_file(uploaded.name)
    return count, generated


def tokens_system_instruction(
    client: Client | None = None, settings: Settings | None = None
) -> Any:
    client, settings = _setup(client, settings)
    model = client.generative_model(
        settings.model, system_instruction="You are a cat. Your name is Neko."
    )
    count = model.count_tokens(QUICK_BROWN_FOX)
    print(count)  # total_tokens=23
    return count


def tokens_tools(client: Client | None = None, settings: Settings | None = None) -> Any:
    client, settings = _setup(client, settings)
    declarations = tuple(
        FunctionDeclaration(name) for name in ("add", "subtract", "multiply", "divide")
    )
    model = client.generative_model(
        settings.model, tools=[Tool(function_declarations=declarations)]
    )
    count = model.count_tokens(
        "I have 57 cats, each owns 44 mittens, how many mittens is that in total?"
    )
    print(count)  # total_tokens=99
    return count


SAMPLES: dict[str, Callable[[Client | None, Settings | None], Any]] = {
    "tokens_text_only": tokens_text_only,
    "tokens_chat": tokens_chat,
    "tokens_multimodal_image_inline": tokens_multimodal_image_inline,
    "tokens_multimodal_image_file_api": tokens_multimodal_image_file_api,
    "tokens_multimodal_video_audio_file_api": tokens_multimodal_video_audio_file_api,
    "tokens_cached_content": tokens_cached_content,
    "tokens_system_instruction": tokens_system_instruction,
    "tokens_tools": tokens_tools,
}


def run_all(
    client: Client | None = None,
    settings: Settings | None = None,
    names: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Run the selected samples (all by default) one after another."""
    selected = list(names) if names else list(SAMPLES)
    unknown = [n for n in selected if n not in SAMPLES]
    if unknown:
        raise ValueError(f"Unknown sample(s) {unknown}. Available: {list(SAMPLES)}")

    client, settings = _setup(client, settings)
    results: dict[str, Any] = {}
    for name in selected:
        logger.info("Running %s", name)
        results[name] = SAMPLES[name](client, settings)
    return results
