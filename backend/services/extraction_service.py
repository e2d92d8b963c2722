"""
Extraction service - Groq-based structured extraction of one intervention block.
"""
import json
import re

from config.config import config
from engine.normalizer import normalize_payload, ExtractedInterventionPayload
from services.extraction_fallbacks import apply_fallbacks, normalize_domain_typos, pick_detail
from services.prompts import build_messages

DETAIL_MODES = ("auto", "breve", "extendido")


def extract_intervention(text: str, fecha_texto: str | None = None, fecha_iso: str | None = None, detail: str = "auto"):
    """
    Ask the LLM for the facts of one intervention block and repair its answer.
    Returns (payload, mode). The payload date is the block's ISO date.
    Raises ValueError if Groq is not configured; API errors propagate.
    """
    if not config.GROQ_API_KEY:
        raise ValueError("GROQ_API_KEY is not set. Add it to your .env to analyze interventions.")
    if detail not in DETAIL_MODES:
        detail = "auto"

    mode = pick_detail(detail, text)
    block = normalize_domain_typos(clamp_text(text, config.MAX_BLOCK_CHARS))
    content = _call_groq(build_messages(block, fecha_texto or fecha_iso, mode))

    payload = parse_extraction(content, fecha=fecha_iso)
    apply_fallbacks(payload, text)
    return payload, mode


def clamp_text(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit]


def parse_extraction(content: str | None, fecha: str | None = None) -> ExtractedInterventionPayload:
    """
    Parse the model's JSON answer into a normalized payload.
    Text around the outermost braces is ignored; an unparseable answer becomes
    an empty payload whose summary is the start of the raw answer.
    """
    content = content or "{}"
    for candidate in (content, _outer_braces(content)):
        if candidate is None:
            continue
        try:
            return normalize_payload(json.loads(candidate), fecha=fecha)
        except ValueError:
            continue
    payload = normalize_payload(None, fecha=fecha)
    payload.resumen = content[:300].strip() or None
    return payload


def _outer_braces(content: str) -> str | None:
    m = re.search(r"\{.*\}", content, re.DOTALL)
    return m.group(0) if m else None


def _call_groq(messages: list) -> str:
    """Call Groq chat completion in JSON mode. Returns the assistant message content."""
    from groq import Groq

    client = Groq(api_key=config.GROQ_API_KEY)
    response = client.chat.completions.create(
        messages=messages,
        model=config.GROQ_MODEL,
        temperature=0,
        response_format={"type": "json_object"},
        max_tokens=2048,
    )
    if not response.choices or not response.choices[0].message.content:
        return "{}"
    return response.choices[0].message.content
