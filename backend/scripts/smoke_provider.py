"""Send one real generation request to an AI provider.

Usage (from repo root):
    python backend/scripts/smoke_provider.py openai sk-... "Bonjour, vous êtes ouverts ?"

Usage (from backend/):
    python scripts/smoke_provider.py claude sk-ant-... "Do you ship abroad?" --language en
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from autoresponder.providers import ProviderKind, build_system_prompt, get_provider
from autoresponder.providers.types import ModelParams
from autoresponder.responder.types import AIConfigSnapshot


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Smoke-test an AI provider.")
    parser.add_argument("provider", choices=[kind.value for kind in ProviderKind])
    parser.add_argument("api_key")
    parser.add_argument("message")
    parser.add_argument("--model", default=None, help="Model name (default: provider default)")
    parser.add_argument("--tone", default="friendly")
    parser.add_argument("--style", default="short")
    parser.add_argument("--language", default="fr")
    parser.add_argument("--validate-only", action="store_true", help="Only probe the credentials.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    provider = get_provider(ProviderKind.parse(args.provider))
    config = AIConfigSnapshot(
        provider=provider.kind.value,
        model=args.model or provider.default_model,
        api_key=args.api_key,
        temperature=None,
        max_tokens=None,
        instructions=None,
        tone=args.tone,
        style=args.style,
        language=args.language,
    )

    if args.validate_only:
        check = provider.validate_credentials(config)
        print(json.dumps({"ok": check.ok, "reason": check.reason}, indent=2))
        return

    system_prompt = build_system_prompt(config)
    reply = provider.generate_reply(
        system_prompt,
        args.message,
        ModelParams.from_config(config, default_model=provider.default_model),
    )
    print(json.dumps({"system_prompt": system_prompt, "reply": reply}, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
