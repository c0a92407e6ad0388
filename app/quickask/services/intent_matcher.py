"""
Purpose: Turn normalized free text into a structured Intent.
Why: Keeps the command grammar in one ordered table. The first template that
matches wins, so reordering INTENT_TEMPLATES changes behavior.

What is inside:
- INTENT_TEMPLATES: ordered (open-site, quantified, question prefixes, catch-all).
- match(normalized) -> Intent | None
- site_url(site) -> str

Testing: Pure functions; table-driven tests plus a pinned template order.
"""

from __future__ import annotations
import re
from typing import Optional

from ..models import Intent, IntentAction, IntentTemplate
from .normalizer import singularize

CATCH_ALL = "catch_all"

# No summary has more sentences than this; larger counts behave the same.
MAX_LINE_LIMIT = 1000

_QUESTION_PREFIXES = [
    ("who_is", "who is"),
    ("what_is", "what is"),
    ("what_is_that", "what is that"),
    ("explain_the", "explain the"),
    ("why_are", "why are"),
    ("can_you_tell", "can you tell"),
    ("explain_these", "explain these"),
    ("tell_me_the", "tell me the"),
    ("explain_details", "explain details"),
    ("define", "define"),
    ("what_do_you_know_about", "what do you know about"),
    ("give_me_info_about", "give me info about"),
]


def _template(name: str, pattern: str, arity: int, action: IntentAction) -> IntentTemplate:
    return IntentTemplate(name=name, pattern=re.compile(pattern), arity=arity, action=action)


INTENT_TEMPLATES: tuple[IntentTemplate, ...] = (
    _template("open_site", r"^open (.+)", 1, IntentAction.OPEN_SITE),
    _template(
        "lines_of", r"^give me (\d+) number of lines (.+)", 2, IntentAction.LIMITED_LOOKUP
    ),
    _template("write_number_of", r"^write (\d+) number of (.+)", 2, IntentAction.LIMITED_LOOKUP),
    *(
        _template(name, rf"^{prefix} (.+)", 1, IntentAction.GENERIC_LOOKUP)
        for name, prefix in _QUESTION_PREFIXES
    ),
    _template(
        CATCH_ALL,
        r"(?:explain|tell me|give me|write|details|definition|meaning of)?\s*(.+)",
        1,
        IntentAction.GENERIC_LOOKUP,
    ),
)


def site_url(site: str) -> str:
    """Keep literal URLs; otherwise guess https://<site without spaces>.com."""
    if "http" in site:
        return site
    return f"https://{site.replace(' ', '')}.com"


def _line_limit(count: str) -> int:
    # int() refuses very long digit strings, so compare lengths first
    digits = count.lstrip("0") or "0"
    if len(digits) > len(str(MAX_LINE_LIMIT)):
        return MAX_LINE_LIMIT
    return min(int(digits), MAX_LINE_LIMIT)


def _build(template: IntentTemplate, groups: tuple[str, ...]) -> Optional[Intent]:
    if template.action == IntentAction.OPEN_SITE:
        site = groups[0].strip()
        return Intent(
            action=template.action,
            template=template.name,
            params={"site": site, "url": site_url(site)},
        )

    if template.action == IntentAction.LIMITED_LOOKUP:
        count, topic = groups
        return Intent(
            action=template.action,
            template=template.name,
            params={"topic": singularize(topic.strip()), "line_limit": _line_limit(count)},
        )

    topic = groups[0].strip()
    if not topic:
        return None
    return Intent(action=template.action, template=template.name, params={"topic": topic})


def match(
    normalized: str, templates: tuple[IntentTemplate, ...] = INTENT_TEMPLATES
) -> Optional[Intent]:
    """First applicable template wins; None when nothing applies."""
    for template in templates:
        m = template.pattern.match(normalized)
        if not m:
            continue
        intent = _build(template, m.groups())
        if intent is not None:
            return intent
    return None
