"""Predefined response rule services."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from autoresponder.models.rule import Rule
from autoresponder.schemas.rule import RuleCreate


def create_rule(db: Session, owner_id: int, channel_id: str, payload: RuleCreate) -> Rule:
    """Persist a new keyword rule."""

    rule = Rule(
        owner_id=owner_id,
        channel_id=channel_id,
        keyword=payload.keyword,
        response_text=payload.response_text.strip(),
        match_type=payload.match_type.value,
        case_sensitive=payload.case_sensitive,
        priority=payload.priority,
        active=payload.active,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


def list_rules(db: Session, owner_id: int, channel_id: str) -> list[Rule]:
    """Return every rule of a channel, highest priority first."""

    stmt = (
        select(Rule)
        .where(Rule.owner_id == owner_id, Rule.channel_id == channel_id)
        .order_by(Rule.priority.desc(), Rule.id.asc())
    )
    return list(db.scalars(stmt).all())


def list_active_rules(db: Session, owner_id: int, channel_id: str) -> list[Rule]:
    """Return active rules in evaluation order (priority, then keyword length)."""

    stmt = (
        select(Rule)
        .where(Rule.owner_id == owner_id, Rule.channel_id == channel_id, Rule.active.is_(True))
        .order_by(Rule.priority.desc(), func.length(Rule.keyword).desc(), Rule.id.asc())
    )
    return list(db.scalars(stmt).all())


def delete_rule(db: Session, owner_id: int, rule_id: int) -> bool:
    """Delete one rule owned by ``owner_id``."""

    rule = db.scalar(select(Rule).where(Rule.id == rule_id, Rule.owner_id == owner_id))
    if rule is None:
        return False
    db.delete(rule)
    db.commit()
    return True
