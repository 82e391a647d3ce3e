import asyncio
import base64
import os
import sys

# Add project root to path so we can import verdict
sys.path.append(os.getcwd())

from verdict.config.settings import settings
from verdict.errors import VerdictError
from verdict.services import build_transcribe_service


async def main():
    file_path = "out.webm"
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found. Please provide a path to an audio file.")
        print("Usage: python scripts/transcribe_file.py [path/to/audio.webm]")
        return

    print(f"Reading {file_path}...")
    with open(file_path, "rb") as f:
        audio_bytes = f.read()

    service = build_transcribe_service(settings)

    print(f"Transcribing {len(audio_bytes)} bytes with {settings.openai.transcription_model}...")
    try:
        result = await service.transcribe(base64.b64encode(audio_bytes).decode("ascii"))

        print("\n--- Transcript Result ---")
        print(result.text)
        print("-------------------------")
        for segment in result.segments:
            print(f"[{segment.start}-{segment.end}] {segment.text}")

    except VerdictError as e:
        print(f"\nTranscription Error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
