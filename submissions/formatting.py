"""Convert raw answers into their persisted representation."""
from __future__ import annotations

import json
from typing import List, Optional


def format_answer(question, raw_answer: Optional[str]) -> str:
    """Return the value stored for ``raw_answer`` given to ``question``.

    Choice answers become a JSON array of the matched option ids, in the
    order the values appear in the raw answer. When nothing matches, the raw
    answer is stored as typed.
    """

    raw = raw_answer if raw_answer is not None else ""
    options = list(question.options.all())
    if not (question.is_choice or options):
        return raw

    by_value = {}
    for option in options:
        by_value.setdefault(option.value, option)

    matched: List[str] = []
    for token in raw.split(","):
        option = by_value.get(token.strip())
        if option is not None:
            matched.append(option.option_id or "")

    if not matched:
        return raw
    return json.dumps(matched, separators=(",", ":"))
