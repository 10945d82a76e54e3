"""02 — Chat History.

Start a chat with existing history, count the tokens the history costs,
then keep talking. The session appends each successful round trip.
"""

from genai_tokens import Client, Content, TextPart

client = Client()
model = client.generative_model("gemini-1.5-flash", system_instruction="Answer briefly.")

chat = model.start_chat(
    history=[
        Content(role="user", parts=(TextPart("Hi my name is Bob"),)),
        Content(role="model", parts=(TextPart("Hi Bob!"),)),
    ]
)

print("History tokens:", model.count_tokens(chat.get_history()).total_tokens)

for question in ["What is my name?", "Spell it backwards."]:
    reply = chat.send_message(question)
    print(f"  Q: {question}")
    print(f"  A: {reply.text}  ({reply.usage_metadata.total_token_count} tokens)")

print("Turns so far:", len(chat.get_history()))
