"""Seed a demo page with keyword rules and an AI configuration.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py --ai-key sk-...
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete

# Make `autoresponder` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from autoresponder.db.session import SessionLocal
from autoresponder.models.ai_config import AIConfig
from autoresponder.models.rule import Rule
from autoresponder.providers.clients import get_provider
from autoresponder.providers.types import ProviderKind
from autoresponder.responder.types import MatchType
from autoresponder.schemas.ai_config import AIConfigUpsert
from autoresponder.schemas.channel import ChannelCreate
from autoresponder.schemas.rule import RuleCreate
from autoresponder.services.ai_configs import upsert_ai_config
from autoresponder.services.channels import upsert_channel
from autoresponder.services.rules import create_rule


DEFAULT_OWNER_ID = 1
DEFAULT_CHANNEL_ID = "demo-page-001"


def build_demo_rules() -> list[RuleCreate]:
    """Return a deterministic set of rules covering every match type."""

    return [
        RuleCreate(keyword="hi", response_text="Hello! How can we help you today?", match_type=MatchType.EXACT),
        RuleCreate(keyword="bonjour", response_text="Bonjour ! Comment pouvons-nous vous aider ?"),
        RuleCreate(
            keyword="order",
            response_text="Please send us your order number and we will check its status.",
            match_type=MatchType.STARTS_WITH,
            priority=5,
        ),
        RuleCreate(
            keyword="help",
            response_text="A team member will get back to you shortly.",
            match_type=MatchType.ENDS_WITH,
        ),
        RuleCreate(keyword="horaires", response_text="Nous sommes ouverts du lundi au vendredi, 9h-18h.", priority=3),
    ]


def reset_channel(db, owner_id: int, channel_id: str) -> None:
    """Remove existing rules and AI configuration for the demo page."""

    db.execute(delete(Rule).where(Rule.owner_id == owner_id, Rule.channel_id == channel_id))
    db.execute(delete(AIConfig).where(AIConfig.owner_id == owner_id, AIConfig.channel_id == channel_id))
    db.commit()


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed a demo page with rules and an AI configuration.")
    parser.add_argument("--owner-id", type=int, default=DEFAULT_OWNER_ID)
    parser.add_argument(
        "--channel-id",
        default=DEFAULT_CHANNEL_ID,
        help=f"Page ID to seed (default: {DEFAULT_CHANNEL_ID})",
    )
    parser.add_argument("--access-token", default="demo-page-token", help="Page access token to store.")
    parser.add_argument("--ai-provider", default=ProviderKind.OPENAI.value, choices=[kind.value for kind in ProviderKind])
    parser.add_argument("--ai-key", default=None, help="Provider API key; the AI config stays inactive without one.")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing rules and AI configuration before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    owner_id: int = args.owner_id
    provider_kind = ProviderKind(args.ai_provider)
    channel_id: str = args.channel_id

    with SessionLocal() as db:
        if not args.no_reset:
            reset_channel(db, owner_id, channel_id)

        upsert_channel(
            db,
            owner_id,
            ChannelCreate(channel_id=channel_id, name="Demo Page", access_token=args.access_token, verify_token=False),
        )
        rules = [create_rule(db, owner_id, channel_id, payload) for payload in build_demo_rules()]
        ai_config = upsert_ai_config(
            db,
            owner_id,
            channel_id,
            AIConfigUpsert(
                provider=provider_kind,
                model=get_provider(provider_kind).default_model,
                api_key=args.ai_key or "unset",
                tone="friendly",
                style="short",
                language="fr",
                active=bool(args.ai_key),
            ),
        )
        ai_active = ai_config.active

    print("Seed complete")
    print(f"owner_id={owner_id}")
    print(f"channel_id={channel_id}")
    print(f"rules_created={len(rules)}")
    print(f"ai_config_active={ai_active}")
    print()
    print("Inspect:")
    print(f"  GET /owners/{owner_id}/channels")
    print(f"  GET /owners/{owner_id}/channels/{channel_id}/rules")
    print(f"  GET /owners/{owner_id}/channels/{channel_id}/ai-config")


if __name__ == "__main__":
    main()
