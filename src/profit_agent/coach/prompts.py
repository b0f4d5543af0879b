"""LLM prompt templates for the triathlon coach."""

from typing import List

from .context import AthleteContext

# ============================================================================
# COACH PERSONA
# ============================================================================

COACH_INTRO = """You are an expert triathlon coach AI inside the "Pro Fit Agent" app. You coach athletes preparing for Ironman 70.3 races.
Your tone is encouraging but honest, like a knowledgeable friend who happens to be a pro coach. Use short paragraphs. Use emoji sparingly (1-2 per response max).
Keep responses concise (under 250 words for chat, under 400 words for summaries)."""

# ============================================================================
# PLAN CHANGE INSTRUCTIONS
# ============================================================================

PLAN_CHANGES_INSTRUCTIONS = """--- MODIFYING THE PLAN ---
You may change the athlete's upcoming sessions when they ask, or when recovery data clearly calls for it.
Only reference session ids listed under UPCOMING SESSIONS. To change the plan, end your reply with:
[PLAN_CHANGES]
[{"action": "cancel", "sessionId": "<id>"},
 {"action": "reschedule", "sessionId": "<id>", "newDate": "YYYY-MM-DD"},
 {"action": "add", "date": "YYYY-MM-DD", "sport": "Swim|Bike|Run|Strength", "type": "Z2", "duration": 45, "distance": 0, "intensity": "Easy|Moderate|Hard", "description": "..."}]
[/PLAN_CHANGES]
Distances are metres for swims and kilometres otherwise. Tell the athlete in plain words what you changed. Omit the block when nothing changes."""

# ============================================================================
# MODE TASKS
# ============================================================================

CHAT_TASK = """--- TASK ---
Answer the athlete's question using their training data. Be specific and actionable. Reference their actual numbers when possible."""

SUMMARY_TASK = """--- TASK ---
Generate a weekly training summary with these sections:
1. **Week Overview** - how the week went overall
2. **What Went Well** - positive highlights
3. **Areas to Improve** - honest but constructive feedback
4. **Recovery Check** - based on body metrics and training load
5. **Next Week Focus** - 2-3 specific priorities
If data is limited, say so and give general advice for the athlete's level."""

NUTRITION_TASK = """--- TASK ---
Suggest a one-day meal plan that fits the athlete's body weight, current phase and recent training load.
List meals with rough portions. Do not prescribe medical or supplement advice."""

SUMMARY_USER_MESSAGE = "Generate my weekly training summary and recommendations based on my data."
NUTRITION_USER_MESSAGE = "Create a meal plan for today based on my training."
DEFAULT_CHAT_MESSAGE = "How is my training going?"

MODE_TASKS = {
    "chat": CHAT_TASK,
    "summary": SUMMARY_TASK,
    "nutrition": NUTRITION_TASK,
}


def _profile_section(ctx: AthleteContext) -> List[str]:
    o = ctx.onboarding
    if not o:
        return []
    lines = ["--- ATHLETE PROFILE ---"]
    if o.get("age"):
        lines.append(f"Age: {o['age']}")
    if o.get("weight"):
        lines.append(f"Weight: {o['weight']}kg")
    if o.get("experience"):
        lines.append(f"Experience: {o['experience']}")
    if o.get("goal_type"):
        lines.append(f"Goal: {o['goal_type']}")
    if o.get("race_date"):
        lines.append(f"Race date: {o['race_date']}")
    if ctx.weeks_to_race is not None:
        lines.append(f"Weeks to race: {ctx.weeks_to_race}")
    if o.get("priority"):
        lines.append(f"Priority: {o['priority']}")
    if o.get("hours_per_week"):
        lines.append(f"Available: {o['hours_per_week']} hrs/week")
    lines.append(f"Can swim 1.9km: {'Yes' if o.get('can_swim_1900m') else 'No'}")
    if o.get("five_k_time"):
        lines.append(f"5K time: {round(o['five_k_time'] / 60)} minutes")
    if o.get("ftp"):
        lines.append(f"FTP: {o['ftp']}W")
    return lines


def _plan_section(ctx: AthleteContext) -> List[str]:
    p = ctx.plan
    if not p:
        return []
    return [
        "--- CURRENT PLAN ---",
        f"Phase: {p['phase']}",
        f"Weekly targets: {p['weekly_swim_sessions']} swims, {p['weekly_bike_km']}km bike, "
        f"{p['weekly_run_km']}km run, {p['weekly_strength_sessions']} strength",
    ]


def _week_section(ctx: AthleteContext) -> List[str]:
    w = ctx.week_stats
    lines = [
        "--- THIS WEEK ---",
        f"Completed: {w.completed}/{w.total} sessions ({w.compliance_percent}%)",
        f"Skipped: {w.skipped}",
    ]
    if w.swim_distance_m:
        lines.append(f"Swim: {w.swim_distance_m:g}m")
    if w.bike_distance_km:
        lines.append(f"Bike: {w.bike_distance_km:g}km")
    if w.run_distance_km:
        lines.append(f"Run: {w.run_distance_km:g}km")
    lines.append(f"Total duration: {w.total_minutes} minutes")
    return lines


def _body_section(ctx: AthleteContext) -> List[str]:
    if not ctx.recent_body:
        return []
    lines = ["--- RECENT BODY METRICS ---"]
    for b in ctx.recent_body:
        parts = [b["date"]]
        if b.get("weight"):
            parts.append(f"{b['weight']}kg")
        if b.get("sleep"):
            parts.append(f"{b['sleep']}h sleep")
        if b.get("fatigue"):
            parts.append(f"fatigue {b['fatigue']}/10")
        lines.append(" | ".join(parts))
    return lines


def _log_line(s: dict) -> str:
    unit = "m" if s["sport"].lower() == "swim" else "km"
    return f"{s['date']}: {s['sport']} {s['type']} - {s['duration']}min, {s['distance']:g}{unit}, RPE {s['rpe']}"


def _workouts_section(ctx: AthleteContext) -> List[str]:
    lines: List[str] = []
    if ctx.recent_sessions:
        lines.append(f"--- RECENT WORKOUTS (last {len(ctx.recent_sessions)}) ---")
        lines.extend(_log_line(s) for s in ctx.recent_sessions)
    if ctx.recent_strength_sessions:
        lines.append(f"Strength sessions in the last 14 days: {len(ctx.recent_strength_sessions)}")
    return lines


def _upcoming_section(ctx: AthleteContext) -> List[str]:
    if not ctx.planned_sessions_list:
        return []
    lines = ["--- UPCOMING SESSIONS ---"]
    for s in ctx.planned_sessions_list:
        unit = "m" if s["sport"].lower() == "swim" else "km"
        lines.append(
            f"[{s['id']}] {s['date']}: {s['sport']} {s['type']} {s['duration']}min "
            f"{s['distance']:g}{unit} {s['intensity']}"
        )
    return lines


def build_system_prompt(ctx: AthleteContext, mode: str = "chat") -> str:
    """Render the coach system prompt; the mode only changes the task framing."""
    sections = [COACH_INTRO, f"Today is {ctx.today.isoformat()}."]
    for block in (
        _profile_section(ctx),
        _plan_section(ctx),
        _week_section(ctx),
        _body_section(ctx),
        _workouts_section(ctx),
        _upcoming_section(ctx),
    ):
        if block:
            sections.append("\n".join(block))
    sections.append(MODE_TASKS.get(mode, CHAT_TASK))
    if mode != "nutrition" and ctx.can_modify_plan:
        sections.append(PLAN_CHANGES_INSTRUCTIONS)
    return "\n\n".join(sections)
