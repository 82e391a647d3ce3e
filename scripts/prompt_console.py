#!/usr/bin/env python3
"""
Interactive console for exercising the analysis pipeline without the HTTP layer.

Usage: python scripts/prompt_console.py
"""
import asyncio
import json
import os
import sys

# Add project root to path so we can import verdict
sys.path.append(os.getcwd())

from verdict.config.settings import settings
from verdict.errors import VerdictError
from verdict.pipelines.analysis import AnalysisRequest, CounselingMode, build_prompt
from verdict.services import AnalysisService, build_llm_client

SAMPLE_DATA = {
    "dinner": (
        "I like Italian food, especially pasta and pizza. I'm also a fan of fresh "
        "ingredients and homemade meals. I don't like spicy food that much.",
        "I prefer Asian cuisine, especially Thai and Japanese. I love spicy food "
        "and enjoy trying new and exotic dishes. I'm also vegetarian.",
    ),
    "entertainment": (
        "I enjoy sci-fi movies and TV shows like Star Trek and The Expanse. I also "
        "like documentaries about space and technology.",
        "I prefer comedy and drama series like The Office and Breaking Bad. I also "
        "enjoy true crime documentaries and reality TV shows.",
    ),
    "relationship": (
        "My partner never does their share of household chores. I always have to "
        "remind them to do the dishes and take out the trash.",
        "I feel like my efforts around the house go unnoticed. I do different "
        "chores than my partner expects, but I contribute in my own way.",
    ),
}

MENU_MODES = {
    "2": CounselingMode.DINNER,
    "3": CounselingMode.ENTERTAINMENT,
    "4": CounselingMode.EVALUATOR,
    "5": CounselingMode.COUNSELOR,
}

_service = None


def get_service():
    global _service
    if _service is None:
        _service = AnalysisService(build_llm_client(settings))
    return _service


def ask(prompt, default=""):
    answer = input(prompt).strip()
    return answer or default


def sample_key(mode):
    if mode in (CounselingMode.DINNER, CounselingMode.ENTERTAINMENT):
        return mode.value
    return "relationship"


def collect_inputs(mode):
    partner1_name = ask("\nEnter name for Partner 1 (default: Partner1): ", "Partner1")
    partner2_name = ask("Enter name for Partner 2 (default: Partner2): ", "Partner2")

    print("\nInput style:")
    print("1. Live argument (one shared recording)")
    print("2. Separate statements")
    is_live_argument = ask("\nEnter your choice (1-2): ", "2") == "1"

    print("\nSelect input method:")
    print("1. Use sample data")
    print("2. Enter custom data")
    if ask("\nEnter your choice (1-2): ", "1") == "1":
        partner1_text, partner2_text = SAMPLE_DATA[sample_key(mode)]
        print(f"\nPartner 1 ({partner1_name}) sample data: {partner1_text}")
        print(f"Partner 2 ({partner2_name}) sample data: {partner2_text}")
    else:
        partner1_text = ask(f"\nEnter text for {partner1_name}: ")
        partner2_text = ask(f"Enter text for {partner2_name} (leave empty for none): ") or None

    return AnalysisRequest(
        mode=mode,
        partner1_name=partner1_name,
        partner2_name=partner2_name,
        partner1_text=partner1_text,
        partner2_text=partner2_text,
        is_live_argument=is_live_argument,
    )


async def show_status():
    result = await get_service().check_api_status()
    print(f"\nAccess: {'yes' if result.has_access else 'no'}")
    print(f"Message: {result.message}")


async def run_analysis(mode):
    request = collect_inputs(mode)

    use_stream = True
    if mode in (CounselingMode.EVALUATOR, CounselingMode.COUNSELOR):
        print("\nAnalysis function:")
        print("1. analyze_conflict")
        print("2. create_analysis_stream")
        use_stream = ask("\nEnter your choice (1-2): ", "2") == "2"

    print("\nGenerating verdict...\n")
    service = get_service()
    if use_stream:

        async def on_complete(serialized):
            print("\n--- Stored envelope ---")
            print(serialized)

        outcome = await service.create_analysis_stream(request, on_complete=on_complete)
        print("\n--- Verdict ---")
        print(outcome.ai_response)
        return

    # analyze_conflict takes transcripts in their serialized form
    partner1_payload = json.dumps({"text": request.partner1_text})
    partner2_payload = json.dumps({"text": request.partner2_text}) if request.partner2_text else None
    serialized = await service.analyze_conflict(
        partner1_payload,
        partner2_payload,
        mode,
        request.is_live_argument,
        request.partner1_name,
        request.partner2_name,
    )
    print("\n--- Verdict ---")
    print(json.loads(serialized)["verdict"])


def preview_prompts():
    print("\nMode:")
    for index, mode in enumerate(CounselingMode, start=1):
        print(f"{index}. {mode.value}")
    choice = ask("\nEnter your choice: ", "1")
    modes = list(CounselingMode)
    try:
        mode = modes[int(choice) - 1]
    except (ValueError, IndexError):
        print("Invalid choice")
        return

    request = collect_inputs(mode)
    prompt = build_prompt(
        mode=request.mode,
        partner1_name=request.partner1_name,
        partner2_name=request.partner2_name,
        partner1_text=request.partner1_text,
        partner2_text=request.partner2_text,
        is_live_argument=request.is_live_argument,
    )
    print("\n--- System prompt ---")
    print(prompt.system_prompt)
    print("\n--- User prompt ---")
    print(prompt.user_prompt)


async def main():
    while True:
        print("\n=== Verdict Prompt Console ===")
        print("1. Check API status")
        print("2. Dinner recommendation")
        print("3. Entertainment recommendation")
        print("4. Relationship analysis (evaluator)")
        print("5. Relationship analysis (counselor)")
        print("6. Preview prompts only (no API call)")
        print("7. Exit")

        choice = ask("\nEnter your choice (1-7): ")
        try:
            if choice == "1":
                await show_status()
            elif choice in MENU_MODES:
                await run_analysis(MENU_MODES[choice])
            elif choice == "6":
                preview_prompts()
            elif choice == "7":
                print("Goodbye!")
                return
            else:
                print("Invalid choice")
        except VerdictError as e:
            print(f"\nError: {e}")
            if e.__cause__ is not None:
                print(f"Cause: {e.__cause__}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, EOFError):
        print()
