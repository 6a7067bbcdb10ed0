"""Embed and message builders.

Builds the plain-dict embeds and text messages the tenant processor posts.
Embeds follow the common chat-webhook embed shape (title, description,
color, fields, footer, timestamp).
"""

from datetime import UTC, datetime

from wicketarr.consumers.classifier import classify_gender
from wicketarr.core.types import BattingLine, BowlingLine, Innings, Match, Scorecard

COLOR_LIVE = 0x5865F2
COLOR_SUMMARY = 0x43B581
COLOR_INNINGS = 0x7289DA

# Upstream batch limit on embeds per message
MAX_EMBEDS_PER_MESSAGE = 10

# Chat platforms cap a single embed field value
MAX_FIELD_LENGTH = 1024

# Plain-text messages are cut below the 2000 character content limit
MAX_MESSAGE_LENGTH = 1900


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def _fmt_number(value) -> str:
    return "?" if value is None else str(value)


def format_innings(innings: list[Innings]) -> str | None:
    """One-line score summary, e.g. 'India Inning 1: 182/6 (20)'."""
    parts = [
        f"{inn.label}: {_fmt_number(inn.runs)}/{_fmt_number(inn.wickets)} "
        f"({_fmt_number(inn.overs)})"
        for inn in innings
    ]
    return " • ".join(parts) if parts else None


def match_embed(match: Match) -> dict:
    """Score update embed for a single match."""
    title = match.name or "Cricket Match"
    match_type = match.match_type.upper()
    description_parts = []
    score = format_innings(match.innings)
    if score:
        description_parts.append(score)
    if match.status:
        description_parts.append(match.status)

    embed = {
        "title": f"{title}  |  {match_type}" if match_type else title,
        "description": "\n".join(description_parts) or "Score not available yet.",
        "color": COLOR_LIVE,
        "timestamp": _timestamp(),
        "fields": [],
        "footer": {"text": "CricketData (near-live)"},
    }
    if match.series:
        embed["fields"].append({"name": "Series", "value": match.series, "inline": True})
    if match.venue:
        embed["fields"].append({"name": "Venue", "value": match.venue, "inline": True})
    if match.teams and match.teams[0].image_url:
        embed["thumbnail"] = {"url": match.teams[0].image_url}
    return embed


def _batting_line(line: BattingLine) -> str:
    out = f" - {line.dismissal}" if line.dismissal else ""
    return (
        f"{line.name}{out}\n {line.runs} ({line.balls})  "
        f"4s:{line.fours}  6s:{line.sixes}  SR:{line.strike_rate}"
    )


def _bowling_line(line: BowlingLine) -> str:
    extras = []
    if line.wides is not None:
        extras.append(f"Wd:{line.wides}")
    if line.no_balls is not None:
        extras.append(f"Nb:{line.no_balls}")
    if line.dots is not None:
        extras.append(f"0s:{line.dots}")
    extra_text = f"  {'  '.join(extras)}" if extras else ""
    return (
        f"{line.name}\n {line.overs} overs  M:{line.maidens}  R:{line.runs}  "
        f"W:{line.wickets}  Econ:{line.economy}{extra_text}"
    )


def _field_value(lines: list[str]) -> str:
    text = "\n".join(lines)
    if len(text) <= MAX_FIELD_LENGTH:
        return text
    return text[: MAX_FIELD_LENGTH - 1] + "…"


def scorecard_embeds(scorecard: Scorecard) -> list[dict]:
    """Summary embed plus one embed per innings, capped at the message limit."""
    title = scorecard.name or "Match Summary"
    top = {
        "title": f"{title} - Summary",
        "description": scorecard.status or "Summary",
        "color": COLOR_SUMMARY,
        "timestamp": _timestamp(),
        "fields": [],
    }
    if scorecard.series:
        top["fields"].append({"name": "Series", "value": scorecard.series, "inline": True})
    if scorecard.venue:
        top["fields"].append({"name": "Venue", "value": scorecard.venue, "inline": True})

    embeds = [top]
    for innings in scorecard.innings:
        embed = {"title": innings.title, "color": COLOR_INNINGS, "fields": []}
        if innings.batting:
            lines = [_batting_line(b) for b in innings.batting]
            embed["fields"].append({"name": "Batting", "value": _field_value(lines)})
        if innings.bowling:
            lines = [_bowling_line(b) for b in innings.bowling]
            embed["fields"].append({"name": "Bowling", "value": _field_value(lines)})
        embeds.append(embed)
    return embeds[:MAX_EMBEDS_PER_MESSAGE]


def tomorrow_listing(matches: list[Match]) -> str:
    """Tomorrow's international fixtures as one text message.

    Fixtures that would push the message past MAX_MESSAGE_LENGTH are left
    out and counted in a closing line.
    """
    if not matches:
        return NO_TOMORROW_MATCHES
    lines = ["**Tomorrow - International fixtures:**"]
    for match in matches:
        when = (
            match.start_time.strftime("%a, %d %b %Y %H:%M GMT") if match.start_time else "Time TBA"
        )
        name = match.name or "Match"
        lines.append(f"• {name} • {match.series} • {classify_gender(match)} • {when}")

    text = "\n".join(lines)
    if len(text) <= MAX_MESSAGE_LENGTH:
        return text
    shown = len(lines)
    while shown > 1:
        shown -= 1
        more = f"…and {len(lines) - shown} more"
        text = "\n".join([*lines[:shown], more])
        if len(text) <= MAX_MESSAGE_LENGTH:
            break
    return text


def stopped_tracking_notice(match_id: str) -> str:
    return f"🛑 Stopped tracking `{match_id}` - match ended / Stumps."


FINAL_SCORECARD_CONTENT = "🧾 Final scorecard:"
NO_FALLBACK_MATCHES = "📋 No international or Indian domestic matches to summarize today."
NO_DAILY_MATCHES = "📋 No matches to summarize today for the chosen filters/teams."
NO_TOMORROW_MATCHES = "No international matches scheduled for tomorrow with your filters."
PING_TEST_DISABLED = "ℹ️ Pings are disabled or no roles set."
