"""Initial schema: users, content catalog, exercises, garden and gamification.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            email VARCHAR(320) UNIQUE NOT NULL,
            username VARCHAR(50) UNIQUE NOT NULL,
            password_hash VARCHAR(256) NOT NULL,
            school VARCHAR(200),
            current_grade INTEGER,
            xp INTEGER NOT NULL DEFAULT 0,
            gold INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ,
            last_login TIMESTAMPTZ
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_users_xp ON users(xp DESC, id)")

    # --- Content catalog ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS grades (
            id SERIAL PRIMARY KEY,
            name VARCHAR(16) UNIQUE NOT NULL,
            display_name VARCHAR(64) NOT NULL,
            "order" INTEGER NOT NULL DEFAULT 0
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS materials (
            id SERIAL PRIMARY KEY,
            grade_id INTEGER NOT NULL REFERENCES grades(id) ON DELETE CASCADE,
            name VARCHAR(64) NOT NULL,
            display_name VARCHAR(128) NOT NULL,
            description TEXT,
            image_url VARCHAR(256),
            "order" INTEGER NOT NULL DEFAULT 0,
            CONSTRAINT uq_material_grade_name UNIQUE (grade_id, name),
            CONSTRAINT uq_material_grade_order UNIQUE (grade_id, "order")
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS courses (
            id SERIAL PRIMARY KEY,
            material_id INTEGER NOT NULL REFERENCES materials(id) ON DELETE CASCADE,
            title VARCHAR(200) NOT NULL,
            description TEXT,
            level INTEGER NOT NULL DEFAULT 1,
            "order" INTEGER NOT NULL DEFAULT 0,
            content JSON NOT NULL DEFAULT '{}',
            xp_reward INTEGER NOT NULL DEFAULT 10,
            registry_key VARCHAR(128),
            CONSTRAINT uq_course_material_level_order UNIQUE (material_id, level, "order")
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS course_progress (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            material_id INTEGER NOT NULL REFERENCES materials(id) ON DELETE CASCADE,
            completed BOOLEAN NOT NULL DEFAULT false,
            score INTEGER,
            completed_at TIMESTAMPTZ,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_course_progress_user_course UNIQUE (user_id, course_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_course_progress_user_completed
        ON course_progress(user_id, completed_at) WHERE completed
    """)

    # --- Exercises ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS exercises (
            id SERIAL PRIMARY KEY,
            grade_id INTEGER NOT NULL REFERENCES grades(id) ON DELETE CASCADE,
            material_id INTEGER NOT NULL REFERENCES materials(id) ON DELETE CASCADE,
            question TEXT NOT NULL,
            options JSON NOT NULL DEFAULT '[]',
            answer VARCHAR(256) NOT NULL,
            difficulty VARCHAR(16) NOT NULL DEFAULT 'easy',
            explanation TEXT
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_exercises_grade_material
        ON exercises(grade_id, material_id)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS exercise_sessions (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            grade_id INTEGER NOT NULL REFERENCES grades(id),
            material_id INTEGER NOT NULL REFERENCES materials(id),
            total_questions INTEGER NOT NULL,
            correct_answers INTEGER NOT NULL,
            total_time INTEGER NOT NULL,
            gold_earned INTEGER NOT NULL DEFAULT 0,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_exercise_sessions_user_time
        ON exercise_sessions(user_id, completed_at DESC)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS exercise_answers (
            id SERIAL PRIMARY KEY,
            session_id INTEGER NOT NULL REFERENCES exercise_sessions(id) ON DELETE CASCADE,
            exercise_id INTEGER NOT NULL REFERENCES exercises(id),
            user_answer VARCHAR(256) NOT NULL,
            is_correct BOOLEAN NOT NULL,
            time_spent INTEGER NOT NULL DEFAULT 0
        )
    """)

    # --- Garden ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS plant_types (
            id SERIAL PRIMARY KEY,
            name VARCHAR(64) UNIQUE NOT NULL,
            display_name VARCHAR(128) NOT NULL,
            description TEXT,
            grade VARCHAR(16) NOT NULL,
            seed_price INTEGER NOT NULL,
            water_cost INTEGER NOT NULL,
            growth_stages INTEGER NOT NULL,
            xp_reward INTEGER NOT NULL,
            image_url VARCHAR(256)
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS gardens (
            id SERIAL PRIMARY KEY,
            user_id INTEGER UNIQUE NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS garden_pots (
            id SERIAL PRIMARY KEY,
            garden_id INTEGER NOT NULL REFERENCES gardens(id) ON DELETE CASCADE,
            slot INTEGER NOT NULL,
            plant_type_id INTEGER REFERENCES plant_types(id),
            planted_at TIMESTAMPTZ,
            last_watered TIMESTAMPTZ,
            current_stage INTEGER NOT NULL DEFAULT 0,
            is_ready_to_harvest BOOLEAN NOT NULL DEFAULT false,
            version INTEGER NOT NULL DEFAULT 1,
            CONSTRAINT uq_garden_pot_slot UNIQUE (garden_id, slot)
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS collection_book_entries (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            plant_type_id INTEGER NOT NULL REFERENCES plant_types(id),
            unlocked BOOLEAN NOT NULL DEFAULT false,
            unlocked_at TIMESTAMPTZ,
            times_harvested INTEGER NOT NULL DEFAULT 0,
            CONSTRAINT uq_collection_user_plant UNIQUE (user_id, plant_type_id)
        )
    """)

    # --- Gamification ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badges (
            id SERIAL PRIMARY KEY,
            name VARCHAR(64) UNIQUE NOT NULL,
            display_name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL,
            category VARCHAR(32) NOT NULL,
            image_url VARCHAR(256),
            requirement JSON NOT NULL,
            sort_order INTEGER NOT NULL DEFAULT 0,
            is_active BOOLEAN NOT NULL DEFAULT true
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id INTEGER NOT NULL REFERENCES badges(id),
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_user_badge UNIQUE (user_id, badge_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_badges_user_time
        ON user_badges(user_id, earned_at DESC)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS xp_ledger (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            amount INTEGER NOT NULL,
            source VARCHAR(32) NOT NULL,
            source_id VARCHAR(128),
            description VARCHAR(256),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            idempotency_key VARCHAR(256) UNIQUE
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_xp_ledger_user_time
        ON xp_ledger(user_id, created_at DESC)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS xp_ledger CASCADE")
    op.execute("DROP TABLE IF EXISTS user_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS badges CASCADE")
    op.execute("DROP TABLE IF EXISTS collection_book_entries CASCADE")
    op.execute("DROP TABLE IF EXISTS garden_pots CASCADE")
    op.execute("DROP TABLE IF EXISTS gardens CASCADE")
    op.execute("DROP TABLE IF EXISTS plant_types CASCADE")
    op.execute("DROP TABLE IF EXISTS exercise_answers CASCADE")
    op.execute("DROP TABLE IF EXISTS exercise_sessions CASCADE")
    op.execute("DROP TABLE IF EXISTS exercises CASCADE")
    op.execute("DROP TABLE IF EXISTS course_progress CASCADE")
    op.execute("DROP TABLE IF EXISTS courses CASCADE")
    op.execute("DROP TABLE IF EXISTS materials CASCADE")
    op.execute("DROP TABLE IF EXISTS grades CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
