"""04 — File API Upload.

Upload a local media file, wait for processing to finish, count its
tokens, and clean up. Pass the file path as the first argument.
"""

import sys

from genai_tokens import Client, FileDataPart

path = sys.argv[1] if len(sys.argv) > 1 else "media/Big_Buck_Bunny.mp4"

client = Client()
uploaded = client.files.upload_file(path)
try:
    active = client.files.wait_for_active(uploaded.name, poll_interval=5, timeout=600)
    print(f"{active.display_name}: {active.mime_type}, {active.size_bytes} bytes")

    model = client.generative_model("gemini-1.5-flash")
    count = model.count_tokens(["Describe this file.", FileDataPart.from_file(active)])
    print("Tokens:", count.total_tokens)
    for detail in count.prompt_tokens_details:
        print(f"  {detail.modality}: {detail.token_count}")
finally:
    client.files.delete_file(uploaded.name)
