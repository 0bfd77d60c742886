"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- Single user profile
CREATE TABLE IF NOT EXISTS user_profile (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    goal_type TEXT NOT NULL,
    start_weight REAL NOT NULL,
    current_weight REAL NOT NULL,
    start_date DATE NOT NULL,
    target_weight REAL,
    height REAL,
    age INTEGER,
    gender TEXT,
    bulk_duration_months INTEGER,
    experience_level TEXT,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

-- Weight log (several entries per date are allowed)
CREATE TABLE IF NOT EXISTS weight_entries (
    id TEXT PRIMARY KEY,
    date DATE NOT NULL,
    weight REAL NOT NULL,
    is_cheat_meal BOOLEAN DEFAULT FALSE,
    is_retention BOOLEAN DEFAULT FALSE,
    notes TEXT,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_weight_entries_date ON weight_entries(date);

-- Latest nutrition evaluation (inputs only, derived data is recomputed)
CREATE TABLE IF NOT EXISTS nutrition_evaluation (
    id TEXT PRIMARY KEY,
    evaluation_json TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- One nutrition log per calendar date
CREATE TABLE IF NOT EXISTS daily_logs (
    date DATE PRIMARY KEY,
    log_json TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- User-defined foods (nutrients per 100 g)
CREATE TABLE IF NOT EXISTS custom_foods (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    food_json TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Small key/value documents: goals, recent foods, meal names
CREATE TABLE IF NOT EXISTS app_state (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL
);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
