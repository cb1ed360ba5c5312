"""Input helpers for the interactive menus."""

import asyncio

# Typing this at a preference prompt resets the field to "Any"
CLEAR_WORDS = frozenset({"any", "none", "-"})


async def ask(prompt: str) -> str:
    """Read one line without blocking the event loop."""
    try:
        answer = await asyncio.to_thread(input, prompt)
    except EOFError:
        return "q"
    return answer.strip()


def parse_list(text: str, current: list[str] | None, lower: bool = False) -> list[str] | None:
    """Comma-separated values. Blank keeps ``current``; a clear word unsets."""
    if not text:
        return current
    if text.lower() in CLEAR_WORDS:
        return None
    values = [v.strip() for v in text.split(",") if v.strip()]
    if lower:
        values = [v.lower() for v in values]
    return values or None


def parse_int(text: str, current: int | None) -> int | None:
    """Whole number. Blank or unparsable keeps ``current``; a clear word unsets."""
    if not text:
        return current
    if text.lower() in CLEAR_WORDS:
        return None
    try:
        return int(text)
    except ValueError:
        return current


def parse_float(text: str, current: float | None) -> float | None:
    """Decimal number. Blank or unparsable keeps ``current``; a clear word unsets."""
    if not text:
        return current
    if text.lower() in CLEAR_WORDS:
        return None
    try:
        return float(text)
    except ValueError:
        return current


def parse_choice(text: str, count: int) -> int | None:
    """1-based menu choice to a 0-based index, or None if out of range."""
    try:
        choice = int(text)
    except ValueError:
        return None
    return choice - 1 if 1 <= choice <= count else None
