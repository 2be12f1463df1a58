"""Example: Transcribe an audio file to SRT using the transcription gateway library."""

import asyncio
import os

from transcription_gateway import GatewayConfig, transcribe_audio


async def main():
    """Transcribe an audio file."""
    # Workers AI credentials for the whisper model
    config = GatewayConfig(
        account_id=os.environ["CLOUDFLARE_ACCOUNT_ID"],
        api_token=os.environ["CLOUDFLARE_API_TOKEN"],
    )

    # Read audio file
    audio_path = "path/to/your/audio.mp3"
    with open(audio_path, "rb") as f:
        audio_bytes = f.read()

    # Transcribe
    print("Transcribing audio...")
    output = await transcribe_audio(audio_bytes, config, response_format="srt", language="en")

    print(f"\nSubtitles ({output.media_type}):\n{output.body}")


if __name__ == "__main__":
    asyncio.run(main())
