"""03 — Async Token Counting.

Demonstrates AsyncClient with parallel countTokens requests via
asyncio.gather().
"""

import asyncio

from genai_tokens import AsyncClient


async def main():
    client = AsyncClient()
    model = client.generative_model("gemini-1.5-flash")

    prompts = [
        "Hello!",
        "The quick brown fox jumps over the lazy dog.",
        "In one sentence, explain how a computer works to a young child.",
    ]
    counts = await asyncio.gather(*(model.count_tokens(p) for p in prompts))

    for prompt, count in zip(prompts, counts, strict=True):
        print(f"{count.total_tokens:>4}  {prompt}")


if __name__ == "__main__":
    asyncio.run(main())
