"""
Channel-independent message handling.

Transports (Telegram, WhatsApp, ...) hand over ``(channel_type,
identifier, text)`` and send back whatever string ``handle`` returns.
The reply texts use Markdown-style ``*bold*`` and ``_italic_``.
"""

from datetime import date, timedelta
from typing import List, Optional
import logging

from .commands import CommandKind, ParsedCommand, parse_command
from .pairing import PairingService
from ..db.store import TrainingStore
from ..exceptions import PairingCodeError, ValidationError
from ..models.plans import PlannedSession, SessionStatus
from ..services.activity import ActivityService
from ..services.base import BaseService
from ..services.lifecycle import SessionLifecycleService

SPORT_EMOJI = {"swim": "🏊", "bike": "🚴", "run": "🏃"}
STATUS_ICON = {SessionStatus.COMPLETED: " ✅", SessionStatus.SKIPPED: " ⏭️", SessionStatus.CANCELLED: " ❌"}

WELCOME_TEXT = (
    "👋 Welcome to Pro Fit Agent!\n\n"
    "To connect your account:\n"
    "1. Open the app → tap your avatar → Connect chat\n"
    "2. Generate a pairing code\n"
    "3. Send the 6-digit code here"
)
PAIRING_FAILED_TEXT = "❌ Invalid or expired code. Please generate a new one in the app."
PAIRED_TEXT = "✅ Connected! Your {channel} is now linked to Pro Fit Agent.\n\nTry: *today* or *help*"
LOG_USAGE_TEXT = "❓ Specify a sport: log *run/bike/swim* 45min 7km rpe6"
SLEEP_USAGE_TEXT = "💤 To log sleep, send:\nsleep 7.5\n\nOr with more detail:\nsleep 7.5 notes: slept well"
HELP_TEXT = (
    "🏋️ *Pro Fit Agent Commands*\n\n"
    "📋 *today* - See today's plan\n"
    "📊 *summary* - Weekly overview\n"
    "💤 *sleep 7.5* - Log sleep\n"
    "🏃 *log run 45min 7km rpe6* - Log workout\n"
    "🚴 *log bike 120min 40km rpe5* - Log ride\n"
    "🏊 *log swim 60min rpe7* - Log swim\n"
    "📝 *fatigue 6 sleep 7 weight 78* - Full body log\n\n"
    "That's it! Just type naturally."
)
UNKNOWN_TEXT = (
    "🤔 I didn't catch that. Try:\n\n"
    "• today - see your plan\n"
    "• sleep 7.5 - log sleep\n"
    "• log run 45min 7km - log workout\n"
    "• summary - weekly overview\n"
    "• help - all commands"
)


def sport_emoji(sport: str) -> str:
    return SPORT_EMOJI.get(sport.lower(), "💪")


def format_distance(distance: float, sport: str) -> str:
    unit = "m" if sport.lower() == "swim" else "km"
    return f"{distance:g}{unit}"


class MessageDispatcher(BaseService):

    def __init__(
        self,
        store: TrainingStore,
        pairing: PairingService,
        activity: ActivityService,
        lifecycle: SessionLifecycleService,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._pairing = pairing
        self._activity = activity
        self._lifecycle = lifecycle

    def handle(
        self,
        channel_type: str,
        identifier: str,
        text: str,
        today: Optional[date] = None,
    ) -> str:
        """Reply text for one inbound message."""
        today = today or date.today()
        command = parse_command(text)

        if command.kind == CommandKind.PAIR:
            return self._pair(channel_type, identifier, command.code)

        athlete_id = self._pairing.resolve(channel_type, identifier)
        if athlete_id is None:
            return WELCOME_TEXT

        self.logger.info(f"{channel_type} message from athlete {athlete_id}: {command.kind.value}")
        if command.kind == CommandKind.LOG:
            return self._log_training(athlete_id, command, today)
        if command.kind == CommandKind.BODY:
            return self._log_body(athlete_id, command, today)
        if command.kind == CommandKind.TODAY:
            return self._today(athlete_id, today)
        if command.kind == CommandKind.SUMMARY:
            return self._summary(athlete_id, today)
        if command.kind == CommandKind.HELP:
            return HELP_TEXT
        if command.kind == CommandKind.LOG_USAGE:
            return LOG_USAGE_TEXT
        if command.kind == CommandKind.SLEEP_USAGE:
            return SLEEP_USAGE_TEXT
        return UNKNOWN_TEXT

    def _pair(self, channel_type: str, identifier: str, code: str) -> str:
        try:
            self._pairing.redeem(code, channel_type, identifier)
        except PairingCodeError:
            return PAIRING_FAILED_TEXT
        return PAIRED_TEXT.format(channel=channel_type.capitalize())

    def _log_training(self, athlete_id: str, command: ParsedCommand, today: date) -> str:
        try:
            outcome = self._activity.log_training(
                athlete_id,
                sport=command.sport,
                duration=command.duration,
                distance=command.distance,
                type=command.type,
                rpe=command.rpe,
                notes=command.notes,
                on=today,
            )
        except ValidationError as e:
            return f"❌ Failed to log: {e.message}"

        log = outcome.log
        reply = f"{sport_emoji(log.sport)} *{log.sport} logged!*\n⏱ {log.duration}min"
        if log.distance > 0:
            reply += f" • {format_distance(log.distance, log.sport)}"
        reply += f" • RPE {log.rpe}"
        if log.notes:
            reply += f"\n📝 {log.notes}"
        if outcome.completed_session:
            reply += "\n✅ Planned session marked complete"
        for milestone in outcome.achieved_milestones:
            reply += f"\n\n🏆 *Milestone Achieved!*\n{milestone.icon} {milestone.title}"
        return reply

    def _log_body(self, athlete_id: str, command: ParsedCommand, today: date) -> str:
        entry = self._activity.log_body_metrics(
            athlete_id,
            weight=command.weight,
            sleep=command.sleep,
            fatigue=command.fatigue,
            notes=command.notes,
            on=today,
        )
        reply = "📊 *Metrics logged!*\n"
        if entry.sleep:
            reply += f"💤 Sleep: {entry.sleep:g}h\n"
        if entry.fatigue:
            reply += f"😓 Fatigue: {entry.fatigue:g}/10\n"
        if entry.weight:
            reply += f"⚖️ Weight: {entry.weight:g}kg\n"
        if entry.notes:
            reply += f"📝 {entry.notes}"
        return reply.rstrip("\n")

    def _sessions_on(self, athlete_id: str, day: date) -> List[PlannedSession]:
        sessions = self._store.sessions.list_for_athlete(athlete_id, start=day, end=day)
        return sorted(sessions, key=lambda s: s.sport)

    def _today(self, athlete_id: str, today: date) -> str:
        day_name = f"{today:%A} {today.day} {today:%b}"
        reply = f"📋 *Today's Plan* ({day_name})\n\n"

        todays = self._sessions_on(athlete_id, today)
        if not todays:
            reply += "🧘 Rest day - no sessions planned\n"
        for s in todays:
            reply += f"{sport_emoji(s.sport)} *{s.sport} - {s.type}*{STATUS_ICON.get(s.status, '')}\n"
            reply += f"   {s.duration}min"
            if s.distance > 0:
                reply += f" • {format_distance(s.distance, s.sport)}"
            reply += f" • {s.intensity.value}\n"
            if s.description:
                reply += f"   _{s.description}_\n"
            reply += "\n"

        tomorrow = [
            s for s in self._sessions_on(athlete_id, today + timedelta(days=1))
            if s.status == SessionStatus.PLANNED
        ]
        if tomorrow:
            reply += "*Tomorrow:* " + ", ".join(
                f"{sport_emoji(s.sport)} {s.sport} {s.duration}min" for s in tomorrow
            ) + "\n"

        last = self._store.body_metrics.latest(athlete_id)
        if last:
            reply += f"\n📊 *Last check-in* ({last.date.isoformat()}):"
            if last.sleep:
                reply += f" Sleep {last.sleep:g}h"
            if last.fatigue:
                reply += f" • Fatigue {last.fatigue:g}/10"
            if last.weight:
                reply += f" • {last.weight:g}kg"
        return reply.rstrip("\n")

    def _summary(self, athlete_id: str, today: date) -> str:
        stats = self._lifecycle.week_stats(athlete_id, today)
        hours = round(stats.total_minutes / 60, 1)
        reply = "📊 *Weekly Summary*\n\n"
        reply += f"✅ Sessions: {stats.completed}/{stats.total} ({stats.compliance_percent}%)\n"
        reply += f"⏱ Total: {hours:g}h\n\n"
        reply += f"🏊 Swim: {stats.swim_distance_m:g}m\n"
        reply += f"🚴 Bike: {stats.bike_distance_km:g}km\n"
        reply += f"🏃 Run: {stats.run_distance_km:g}km"

        upcoming = self._store.sessions.list_for_athlete(
            athlete_id, start=today, status=SessionStatus.PLANNED, limit=1
        )
        if upcoming:
            nxt = upcoming[0]
            reply += (
                f"\n\n*Next up:* {sport_emoji(nxt.sport)} {nxt.sport} - {nxt.type} "
                f"({nxt.date.isoformat()})"
            )
        return reply
