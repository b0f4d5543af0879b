"""Database schema for athlete, plan, activity and coach data."""

SCHEMA = """
-- Onboarding profile (one row per athlete, upsert)
CREATE TABLE IF NOT EXISTS athlete_profiles (
    athlete_id TEXT PRIMARY KEY,
    step INTEGER NOT NULL DEFAULT 1,
    completed INTEGER NOT NULL DEFAULT 0,
    age INTEGER,
    weight REAL,
    height REAL,
    experience TEXT,
    goal_type TEXT,
    race_date TEXT,
    priority TEXT,
    hours_per_week REAL,
    pool_days_per_week INTEGER,
    gym_access INTEGER NOT NULL DEFAULT 0,
    can_swim_1900m INTEGER NOT NULL DEFAULT 0,
    five_k_time INTEGER,
    ftp INTEGER,
    race_name TEXT,
    race_location TEXT,
    travel_notes TEXT,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);

-- Active plan (one per athlete, replaced wholesale)
CREATE TABLE IF NOT EXISTS training_plans (
    athlete_id TEXT PRIMARY KEY,
    phase TEXT NOT NULL,
    weekly_swim_sessions INTEGER NOT NULL,
    weekly_bike_km INTEGER NOT NULL,
    weekly_run_km INTEGER NOT NULL,
    weekly_strength_sessions INTEGER NOT NULL,
    start_date TEXT NOT NULL,
    end_date TEXT,
    auto_generated INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS planned_sessions (
    id TEXT PRIMARY KEY,
    athlete_id TEXT NOT NULL,
    date TEXT NOT NULL,
    sport TEXT NOT NULL,
    type TEXT NOT NULL,
    duration INTEGER NOT NULL,
    distance REAL NOT NULL DEFAULT 0,
    intensity TEXT NOT NULL DEFAULT 'Easy',
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'planned',
    completed_session_id TEXT,
    origin TEXT NOT NULL DEFAULT 'system',
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_planned_sessions_athlete_date
    ON planned_sessions(athlete_id, date);

-- Append-only activity log
CREATE TABLE IF NOT EXISTS training_logs (
    id TEXT PRIMARY KEY,
    athlete_id TEXT NOT NULL,
    date TEXT NOT NULL,
    sport TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'Z2',
    duration INTEGER NOT NULL DEFAULT 0,
    distance REAL NOT NULL DEFAULT 0,
    rpe INTEGER NOT NULL DEFAULT 5,
    notes TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_training_logs_athlete_date
    ON training_logs(athlete_id, date);

CREATE TABLE IF NOT EXISTS body_metrics (
    id TEXT PRIMARY KEY,
    athlete_id TEXT NOT NULL,
    date TEXT NOT NULL,
    weight REAL,
    sleep REAL,
    fatigue REAL,
    notes TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_body_metrics_athlete_date
    ON body_metrics(athlete_id, date);

CREATE TABLE IF NOT EXISTS milestones (
    id TEXT PRIMARY KEY,
    athlete_id TEXT NOT NULL,
    title TEXT NOT NULL,
    icon TEXT NOT NULL DEFAULT '',
    rule_type TEXT NOT NULL,
    target_date TEXT,
    rule_json TEXT,
    status TEXT NOT NULL DEFAULT 'upcoming',
    achieved_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_milestones_athlete ON milestones(athlete_id, status);

-- Coach conversation (append-only)
CREATE TABLE IF NOT EXISTS chat_turns (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    athlete_id TEXT NOT NULL,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_chat_turns_athlete ON chat_turns(athlete_id, id);

-- Messaging channel pairing
CREATE TABLE IF NOT EXISTS pairing_codes (
    id TEXT PRIMARY KEY,
    athlete_id TEXT NOT NULL,
    code TEXT NOT NULL,
    expires_at TEXT NOT NULL,
    consumed_at TEXT,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_pairing_codes_code ON pairing_codes(code);

CREATE TABLE IF NOT EXISTS channel_links (
    athlete_id TEXT NOT NULL,
    channel_type TEXT NOT NULL,
    channel_identifier TEXT NOT NULL,
    verified INTEGER NOT NULL DEFAULT 1,
    PRIMARY KEY (athlete_id, channel_type),
    UNIQUE (channel_type, channel_identifier)
);
"""
