"""End-to-end tests for the command-line interface."""

import json

import pandas as pd
import pytest

from staff_scheduler.cli import main
from staff_scheduler.domain.db import get_session
from staff_scheduler.domain.models import Organization, ScheduleMonth


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    main(["--db", url, "init-db"])
    session = get_session(url)
    session.add(Organization(name="CLI Kitchen"))
    session.commit()
    session.close()
    return url


@pytest.mark.integration
def test_full_cli_flow(db_url, tmp_path, capsys):
    staff_csv = tmp_path / "staff.csv"
    staff_csv.write_text("display_name,role_in_kitchen\nAna,COOK\nBen,COOK\nCleo,WAITER\n")
    roster_csv = tmp_path / "roster.csv"

    main(["--db", db_url, "import-csv", "--org", "1", "--staff", str(staff_csv)])
    main(["--db", db_url, "create-month", "--org", "1", "--month", "2025-03"])
    main(
        [
            "--db", db_url, "generate", "--org", "1", "--month-id", "1",
            "--from", "2025-03-03", "--to", "2025-03-09", "--out", str(roster_csv),
        ]
    )
    main(["--db", db_url, "validate", "--org", "1", "--month-id", "1"])
    main(["--db", db_url, "publish", "--org", "1", "--month-id", "1"])

    out = capsys.readouterr().out
    assert "[OK] Imported 3 staff" in out
    assert "[OK] Schedule month 1: 2025-03 (DRAFT)" in out
    assert "[OK] Generated 14 shifts" in out
    assert "[OK] Validation passed for month 1" in out
    assert "[OK] Published schedule month 1" in out

    roster = pd.read_csv(roster_csv)
    assert set(roster["date"]) == {f"2025-03-0{d}" for d in range(3, 10)}

    session = get_session(db_url)
    assert session.get(ScheduleMonth, 1).status == "PUBLISHED"
    session.close()


def test_generate_json_output(db_url, capsys):
    main(["--db", db_url, "create-month", "--org", "1", "--month", "2025-03"])
    capsys.readouterr()

    main(["--db", db_url, "generate", "--org", "1", "--month-id", "1", "--json"])

    result = json.loads(capsys.readouterr().out)
    assert result == {"created_shifts": 0, "created_assignments": 0, "warnings": ["No active staff"]}


def test_unknown_month_fails(db_url, capsys):
    with pytest.raises(LookupError):
        main(["--db", db_url, "generate", "--org", "1", "--month-id", "42"])
    assert "[ERROR] Generation failed" in capsys.readouterr().out


def test_config_file_is_used(db_url, tmp_path, capsys):
    config = tmp_path / "scheduler.yaml"
    config.write_text("log_level: WARNING\n")

    main(["--db", db_url, "--config", str(config), "create-month", "--org", "1", "--month", "2025-04"])

    assert "[OK] Schedule month 1: 2025-04 (DRAFT)" in capsys.readouterr().out


def test_init_db_reset_clears_data(db_url, capsys):
    main(["--db", db_url, "create-month", "--org", "1", "--month", "2025-03"])
    main(["--db", db_url, "init-db", "--reset"])

    assert "[OK] Database reset" in capsys.readouterr().out
    session = get_session(db_url)
    assert session.query(ScheduleMonth).count() == 0
    assert session.query(Organization).count() == 0
    session.close()


def test_sessions_share_one_engine_per_url(db_url, tmp_path):
    first = get_session(db_url)
    second = get_session(db_url)
    other = get_session(f"sqlite:///{tmp_path / 'other.db'}")

    assert first is not second
    assert first.get_bind() is second.get_bind()
    assert other.get_bind() is not first.get_bind()
    for session in (first, second, other):
        session.close()
