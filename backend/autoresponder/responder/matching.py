"""Keyword rule ordering and matching."""

from __future__ import annotations

from collections.abc import Iterable

from autoresponder.responder.types import MatchType, RuleSpec


def normalize_message(text: str) -> str:
    """Trim and lower-case inbound text once per resolution."""

    return text.strip().lower()


def order_rules(rules: Iterable[RuleSpec]) -> list[RuleSpec]:
    """Return active rules in evaluation order.

    Highest priority first, then the longest keyword, so the most specific
    rule wins a tie. Rule id only breaks exact ties, which keeps the order
    independent of how the store returned the rows.
    """

    active = [rule for rule in rules if rule.active]
    return sorted(active, key=lambda rule: (-rule.priority, -len(rule.keyword), rule.id))


def rule_matches(rule: RuleSpec, normalized_text: str, raw_text: str) -> bool:
    """Apply one rule's match policy.

    Case-insensitive rules compare a lower-cased keyword with the normalized
    text; case-sensitive rules compare the keyword as written with the
    trimmed original text. Unknown match types behave like ``contains``.
    """

    if rule.case_sensitive:
        keyword = rule.keyword
        candidate = raw_text.strip()
    else:
        keyword = rule.keyword.lower()
        candidate = normalized_text

    if rule.match_type == MatchType.EXACT.value:
        return candidate == keyword
    if rule.match_type == MatchType.STARTS_WITH.value:
        return candidate.startswith(keyword)
    if rule.match_type == MatchType.ENDS_WITH.value:
        return candidate.endswith(keyword)
    return keyword in candidate


def find_matching_rule(text: str, rules: Iterable[RuleSpec]) -> RuleSpec | None:
    """Return the first rule, in evaluation order, whose policy matches."""

    normalized = normalize_message(text)
    for rule in order_rules(rules):
        if rule_matches(rule, normalized, text):
            return rule
    return None
