"""
AI Factor Fetch

Asks the completion provider for a 0-100 fit factor per candidate and parses
the reply. Every failure path degrades to the neutral factor.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..logic.contracts import CollegeCandidate, UserProfile, Questionnaire
from ..logic.constants import AI_NEUTRAL_FACTOR
from ..logic.normalization import clamp_score
from .completion import CompletionProvider
from .prompt_builder import build_ai_factor_prompt

logger = logging.getLogger(__name__)

AI_MODE_LIVE = "live"
AI_MODE_NEUTRAL = "neutral"
AI_MODE_FAILED = "failed"

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_\-]*\s*|\s*```$")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def neutral_factors(candidates: List[CollegeCandidate]) -> Dict[str, int]:
    return {c.id: AI_NEUTRAL_FACTOR for c in candidates}


def extract_json_array(text: str) -> Optional[List[Any]]:
    """
    Pull a JSON array out of model output.
    Tolerates code fences and prose around the array; returns None otherwise.
    """
    raw = (text or "").strip()
    if not raw:
        return None
    raw = _FENCE_RE.sub("", raw).strip()

    try:
        parsed = json.loads(raw)
    except ValueError:
        match = _ARRAY_RE.search(raw)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            return None

    if isinstance(parsed, dict):
        # {"results": [...]} style wrappers
        for value in parsed.values():
            if isinstance(value, list):
                return value
        return None
    return parsed if isinstance(parsed, list) else None


def _parse_factor(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return clamp_score(value)
    if isinstance(value, str):
        try:
            return clamp_score(float(value.strip()))
        except ValueError:
            return None
    return None


def parse_ai_factors(text: str, candidates: List[CollegeCandidate]) -> Tuple[Dict[str, int], int]:
    """
    Map candidate id -> factor from the model reply.
    Unknown ids are ignored; omitted candidates get the neutral factor.
    Returns the factors and how many came from the reply.
    """
    factors = neutral_factors(candidates)
    items = extract_json_array(text)
    if items is None:
        raise ValueError("AI reply did not contain a JSON array")

    parsed = 0
    for item in items:
        if not isinstance(item, dict):
            continue
        college_id = item.get("id")
        if college_id is None or str(college_id) not in factors:
            continue
        factor = _parse_factor(item.get("aiFactor", item.get("aiFitScore")))
        if factor is None:
            continue
        factors[str(college_id)] = factor
        parsed += 1
    return factors, parsed


def fetch_ai_factors(
    candidates: List[CollegeCandidate],
    provider: Optional[CompletionProvider],
    profile: Optional[UserProfile] = None,
    questionnaire: Optional[Questionnaire] = None,
    query: Optional[str] = None,
) -> Tuple[Dict[str, int], str, Optional[str]]:
    """
    Fetch AI factors for the candidate subset.

    Returns:
        (factors, ai_mode, note) where note explains any fallback taken
    """
    if not candidates:
        return {}, AI_MODE_NEUTRAL, None

    if provider is None:
        return neutral_factors(candidates), AI_MODE_NEUTRAL, "No AI backend configured; AI factors set to neutral 50."

    prompt = build_ai_factor_prompt(candidates, profile, questionnaire, query)

    try:
        reply = provider.complete(prompt)
        factors, parsed = parse_ai_factors(reply, candidates)
    except Exception as e:
        # the AI step must never surface as a user-visible error
        logger.warning(f"⚠️ AI factor fetch failed, using neutral factors: {e}")
        return neutral_factors(candidates), AI_MODE_FAILED, f"AI factors unavailable ({type(e).__name__}); using neutral 50."

    note = None
    if parsed < len(candidates):
        note = f"AI reply covered {parsed} of {len(candidates)} candidates; the rest default to 50."
    logger.info(f"🤖 AI factors parsed for {parsed}/{len(candidates)} candidates")
    return factors, AI_MODE_LIVE, note
