"""
Chat command grammar shared by every messaging channel.

    123456                                  pairing code
    log run 45min 7km rpe6 notes: felt good training log
    fatigue 6 sleep 7 weight 78             body check-in
    sleep 7.5                               sleep only (fatigue 5)
    today | plan | next | what | start      today's plan
    summary | status | week                 weekly summary
    help | commands                         command list

A leading "/" is ignored and matching is case-insensitive.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re

from ..models.plans import Sport


class CommandKind(str, Enum):
    PAIR = "pair"
    LOG = "log"
    LOG_USAGE = "log_usage"      # "log" without a recognised sport
    BODY = "body"
    SLEEP_USAGE = "sleep_usage"  # bare "sleep"
    TODAY = "today"
    SUMMARY = "summary"
    HELP = "help"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedCommand:
    kind: CommandKind
    code: Optional[str] = None

    # log
    sport: Optional[str] = None
    duration: int = 0
    distance: float = 0.0
    rpe: int = 5
    type: str = "Z2"

    # body
    fatigue: Optional[float] = None
    sleep: Optional[float] = None
    weight: Optional[float] = None

    notes: str = ""


PAIRING_CODE = re.compile(r"^\d{6}$")
LOG_PREFIX = re.compile(r"^/?log\s+", re.IGNORECASE)
SPORT = re.compile(r"^(run|bike|swim|strength)", re.IGNORECASE)
DURATION = re.compile(r"(\d+)\s*min", re.IGNORECASE)
DISTANCE_KM = re.compile(r"(\d+\.?\d*)\s*km", re.IGNORECASE)
DISTANCE_M = re.compile(r"(\d+)\s*m(?!\w)", re.IGNORECASE)
RPE = re.compile(r"rpe\s*(\d+)", re.IGNORECASE)
NOTES = re.compile(r"notes?:\s*(.+)", re.IGNORECASE)
FATIGUE = re.compile(r"fatigue\s+(\d+\.?\d*)", re.IGNORECASE)
SLEEP = re.compile(r"sleep\s+(\d+\.?\d*)", re.IGNORECASE)
WEIGHT = re.compile(r"weight\s+(\d+\.?\d*)", re.IGNORECASE)

TODAY_PREFIXES = ("today", "plan", "next", "what")
SUMMARY_PREFIXES = ("summary", "status", "week")
BODY_PREFIXES = ("fatigue", "body", "metrics")


def _float(pattern: re.Pattern, text: str) -> Optional[float]:
    match = pattern.search(text)
    return float(match.group(1)) if match else None


def _notes(text: str) -> str:
    match = NOTES.search(text)
    return match.group(1).strip() if match else ""


def parse_log(text: str) -> ParsedCommand:
    """Parse the part of a ``log`` command after the keyword."""
    body = LOG_PREFIX.sub("", text)
    sport_match = SPORT.match(body)
    if not sport_match:
        return ParsedCommand(kind=CommandKind.LOG_USAGE)

    duration = DURATION.search(body)
    distance = _float(DISTANCE_KM, body)
    if distance is None:
        distance = _float(DISTANCE_M, body)
    rpe = RPE.search(body)
    return ParsedCommand(
        kind=CommandKind.LOG,
        sport=Sport.normalize(sport_match.group(1)),
        duration=int(duration.group(1)) if duration else 0,
        distance=distance or 0.0,
        rpe=int(rpe.group(1)) if rpe else 5,
        notes=_notes(body),
    )


def parse_body(text: str) -> ParsedCommand:
    return ParsedCommand(
        kind=CommandKind.BODY,
        fatigue=_float(FATIGUE, text),
        sleep=_float(SLEEP, text),
        weight=_float(WEIGHT, text),
        notes=_notes(text),
    )


def parse_command(text: str) -> ParsedCommand:
    """Classify and parse one inbound chat message."""
    text = (text or "").strip()
    if PAIRING_CODE.match(text):
        return ParsedCommand(kind=CommandKind.PAIR, code=text)

    lower = text.lower()
    if lower.startswith("/"):
        lower = lower[1:]

    if lower.startswith("log "):
        return parse_log(text)
    if lower.startswith(BODY_PREFIXES):
        return parse_body(text)
    if lower == "sleep":
        return ParsedCommand(kind=CommandKind.SLEEP_USAGE)
    if lower.startswith("sleep "):
        # Sleep-only check-ins record a neutral fatigue
        return parse_body("fatigue 5 " + text)
    if lower.startswith(TODAY_PREFIXES) or lower == "start":
        return ParsedCommand(kind=CommandKind.TODAY)
    if lower.startswith(SUMMARY_PREFIXES):
        return ParsedCommand(kind=CommandKind.SUMMARY)
    if lower in ("help", "commands"):
        return ParsedCommand(kind=CommandKind.HELP)
    return ParsedCommand(kind=CommandKind.UNKNOWN)
