"""
Schema and migration management for the roster SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("roster.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        with self._connect() as conn:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS seasons (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                year INTEGER,
                tryout2_date TEXT,
                is_current BOOLEAN DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        # level orders divisions: 1 is the strongest
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS divisions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                level INTEGER NOT NULL,
                active BOOLEAN DEFAULT 1
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                user_id TEXT PRIMARY KEY,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                preferred_name TEXT,
                male BOOLEAN
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS signups (
                season_id INTEGER NOT NULL,
                user_id TEXT NOT NULL,
                pair_pick TEXT,
                dates_missing TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (season_id, user_id),
                FOREIGN KEY (season_id) REFERENCES seasons(id),
                FOREIGN KEY (user_id) REFERENCES players(user_id)
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS season_captains (
                season_id INTEGER NOT NULL,
                user_id TEXT NOT NULL,
                division_id INTEGER NOT NULL,
                PRIMARY KEY (season_id, user_id),
                FOREIGN KEY (season_id) REFERENCES seasons(id),
                FOREIGN KEY (division_id) REFERENCES divisions(id)
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS draft_history (
                user_id TEXT NOT NULL,
                season_id INTEGER NOT NULL,
                overall INTEGER NOT NULL,
                PRIMARY KEY (user_id, season_id)
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS evaluations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                season_id INTEGER NOT NULL,
                player_id TEXT NOT NULL,
                division_id INTEGER NOT NULL,
                FOREIGN KEY (division_id) REFERENCES divisions(id)
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        columns = {row[1] for row in cursor.execute(f"PRAGMA table_info({table})")}
        if column not in columns:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("add_division_team_count", self._migration_add_division_team_count),
            ("create_roster_assignments_table", self._migration_create_roster_assignments_table),
            ("add_roster_indexes_v1", self._migration_add_roster_indexes_v1),
        ]

    # --- Migrations ---

    def _migration_add_division_team_count(self, cursor) -> None:
        # NULL means "use the configured default"
        self._add_column_if_not_exists(cursor, "divisions", "team_count", "INTEGER")

    def _migration_create_roster_assignments_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS roster_assignments (
                season_id INTEGER NOT NULL,
                user_id TEXT NOT NULL,
                division_id INTEGER NOT NULL,
                team_number INTEGER NOT NULL,
                is_captain BOOLEAN DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (season_id, user_id),
                FOREIGN KEY (season_id) REFERENCES seasons(id),
                FOREIGN KEY (division_id) REFERENCES divisions(id)
            )
            """
        )

    def _migration_add_roster_indexes_v1(self, cursor) -> None:
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_signups_season ON signups(season_id)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_draft_history_user ON draft_history(user_id, season_id)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_evaluations_season ON evaluations(season_id, player_id)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_roster_assignments_division "
            "ON roster_assignments(season_id, division_id, team_number)"
        )
