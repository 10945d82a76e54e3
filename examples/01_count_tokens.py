"""01 — Count Tokens.

Minimal starting point: count the input tokens of a prompt, then generate
a reply and compare against the usage metadata on the response.
"""

from genai_tokens import Client

client = Client()
model = client.generative_model("gemini-1.5-flash")

prompt = "The quick brown fox jumps over the lazy dog."
count = model.count_tokens(prompt)
print("Input tokens:", count.total_tokens)

response = model.generate_content(prompt)
usage = response.usage_metadata
print(f"Tokens — in: {usage.prompt_token_count}, out: {usage.candidates_token_count}")
