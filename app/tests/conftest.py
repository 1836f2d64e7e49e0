import os
_default_test_secret = "test-jwt-secret-for-pytest-only-0000000000000000"
if len(os.environ.get("JWT_SECRET", "")) < 32:
    os.environ["JWT_SECRET"] = _default_test_secret

import subprocess
from datetime import date, datetime, timedelta
from itertools import count
from pathlib import Path
from typing import Optional

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url

PROJECT_ROOT = Path(__file__).resolve().parents[2]

TEST_DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{PROJECT_ROOT / 'fieldtime_test.db'}")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("ENV", "test")
os.environ.setdefault("BUSINESS_TIMEZONE", "Asia/Colombo")

from app import database
from app.core.clock import BusinessClock, get_clock
from app.database import SessionLocal
from app.models.employee import Employee
from app.models.enums import JobStatus
from app.models.job_card import JobCard
from app.models.mini_job_card import MiniJobCard

# Midweek, well inside office hours, so OT math starts from zero.
TEST_NOW = datetime(2026, 3, 10, 9, 0, 0)

_sequence = count(1)


class FixedClock(BusinessClock):
    """A business clock that only moves when a test moves it."""

    def __init__(self, current: datetime = TEST_NOW):
        super().__init__("Asia/Colombo")
        self.current = current

    def now(self) -> datetime:
        return self.current.replace(microsecond=0)

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, minutes: int) -> datetime:
        self.current = self.current + timedelta(minutes=minutes)
        return self.current


def _get_access_token(client, employee_id: int, role: str = "EMPLOYEE") -> str:
    resp = client.post("/auth/token", json={"employee_id": employee_id, "role": role})
    assert resp.status_code == 200, f"token request failed: {resp.status_code} {resp.text}"
    data = resp.json()
    assert isinstance(data, dict), f"token response not a JSON object: {data}"
    assert "access_token" in data, f"token response missing access_token: {data}"
    return data["access_token"]


def _ensure_database_exists(database_url: str) -> None:
    url = make_url(database_url)

    if not url.drivername.startswith("postgresql"):
        return

    db_name = url.database
    admin_url = url.set(database="postgres")
    admin_engine = create_engine(admin_url, isolation_level="AUTOCOMMIT")

    try:
        with admin_engine.connect() as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": db_name},
            ).scalar()
            if not exists:
                safe_db_name = db_name.replace('"', '""')
                conn.execute(text(f'CREATE DATABASE "{safe_db_name}"'))
    finally:
        admin_engine.dispose()


def _clear_tables() -> None:
    if database.engine.dialect.name == "postgresql":
        with database.engine.begin() as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT tablename
                    FROM pg_tables
                    WHERE schemaname = 'public'
                      AND tablename <> 'alembic_version'
                    """
                )
            ).fetchall()

            table_names = [row[0] for row in rows]
            if table_names:
                quoted = ", ".join([f'"public"."{name}"' for name in table_names])
                conn.execute(text(f"TRUNCATE TABLE {quoted} RESTART IDENTITY CASCADE"))
        return

    with database.engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(scope="session", autouse=True)
def _prepare_test_database() -> None:
    _ensure_database_exists(TEST_DATABASE_URL)

    env = os.environ.copy()
    env["DATABASE_URL"] = TEST_DATABASE_URL

    subprocess.run(
        ["alembic", "upgrade", "head"],
        check=True,
        cwd=PROJECT_ROOT,
        env=env,
    )

    database.configure_database()


@pytest.fixture(scope="function", autouse=True)
def _truncate_tables_between_tests():
    _clear_tables()
    yield
    _clear_tables()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def api_clock(clock):
    from app.main import app

    app.dependency_overrides[get_clock] = lambda: clock
    yield clock
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def employee_factory():
    def _create(name: Optional[str] = None, role: str = "EMPLOYEE") -> Employee:
        n = next(_sequence)
        session = SessionLocal()
        try:
            row = Employee(
                name=name or f"Technician {n}",
                email=f"tech{n}@example.com",
                role=role,
                is_active=True,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return row
        finally:
            session.close()

    return _create


@pytest.fixture
def job_card_factory():
    def _create(
        employee_id: int,
        *,
        status: str = JobStatus.PENDING.value,
        work_date: date = TEST_NOW.date(),
        changed_at: datetime = TEST_NOW,
        generator_name: str = "Perkins 100kVA",
        location: Optional[str] = None,
    ) -> MiniJobCard:
        n = next(_sequence)
        session = SessionLocal()
        try:
            job_card = JobCard(
                id=f"jc-{n}",
                job_type="SERVICE",
                generator_name=generator_name,
                title=None,
                created_at=changed_at,
            )
            session.add(job_card)
            session.flush()

            task = MiniJobCard(
                id=f"mjc-{n}",
                job_card_id=job_card.id,
                employee_id=int(employee_id),
                status=status,
                work_date=work_date,
                time=changed_at.time(),
                location=location,
                last_status_change_at=changed_at,
                spent_on_hold_minutes=0,
                spent_assigned_minutes=0,
                spent_in_progress_minutes=0,
                created_at=changed_at,
                updated_at=changed_at,
            )
            session.add(task)
            session.commit()
            session.refresh(task)
            return task
        finally:
            session.close()

    return _create
