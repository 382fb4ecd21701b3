# =============================================================================
# main.py  —  Interactive console for the CMS ask resolver
# =============================================================================
#
# HOW TO RUN:
#   python main.py
#
# WHAT HAPPENS:
#   1. Loads CMS settings from .env (CMS_BASE_URL, credentials, ...)
#   2. Opens one CmsClient and wires it into an AskOrchestrator
#   3. Reads asks from the prompt, resolves each one, prints the JSON result
#
# COMMANDS:
#   auto on | auto off   Toggle auto-selection of the best proposed parent
#   quit                 Exit
#
# Every ask you type is a real request: creates and moves are NOT dry runs.
# =============================================================================

import asyncio
import json
import logging

from dotenv import load_dotenv

from core.cms_client import CmsClient
from core.errors import AskError
from core.orchestrator import AskOrchestrator


async def run_console():
    """Read asks from stdin until the user quits."""
    print("=" * 70)
    print("  CMS ASK RESOLVER")
    print("=" * 70)

    try:
        client = CmsClient.from_env()
    except AskError as exc:
        print(f"\n⚠️  {exc}")
        return

    auto_select = False
    async with client:
        orchestrator = AskOrchestrator.for_client(client)
        print(f"\n✅ Connected to {client.settings.api_root}")
        print("   (Type 'auto on' / 'auto off' to toggle parent auto-selection, 'quit' to exit)\n")
        print("-" * 70)

        while True:
            try:
                ask = input("\n🧑 Ask: ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\n\n👋 Goodbye!")
                break

            if ask.lower() in ("quit", "exit", "q"):
                print("\n👋 Goodbye!")
                break
            if ask.lower() in ("auto on", "auto off"):
                auto_select = ask.lower() == "auto on"
                print(f"   auto_select_parent = {auto_select}")
                continue
            if not ask:
                continue

            try:
                result = await orchestrator.resolve(ask, auto_select_parent=auto_select)
            except AskError as exc:
                print(f"\n⚠️  {type(exc).__name__}: {exc}")
                continue

            print(json.dumps(result.to_dict(), indent=2, default=str))


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(run_console())
