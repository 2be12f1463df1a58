"""Example: Call a running gateway with the official OpenAI SDK.

Start the gateway first (``python -m app``) and export API_KEY.
"""

import os

from openai import OpenAI


def main():
    client = OpenAI(base_url="http://127.0.0.1:8090/v1", api_key=os.environ["API_KEY"])

    with open("path/to/your/audio.mp3", "rb") as f:
        transcript = client.audio.transcriptions.create(
            model="whisper-1",
            file=f,
            response_format="verbose_json",
            timestamp_granularities=["word"],
        )

    for word in transcript.words or []:
        print(f"{word.start:7.2f} {word.end:7.2f}  {word.word}")


if __name__ == "__main__":
    main()
