"""Tests for the command line interface."""

import json
import re

from paydesk.cli.main import cli
from paydesk.database.factories import sqlite_url
from paydesk.domain.analysis import FinancialAnalyst

from fakes import fake_client


def test_department_list_shows_seeded_workspace(cli_runner, cli_env, tmp_path):
    """Test a fresh local workspace starts from the default departments."""
    result = cli_runner.invoke(cli, cli_env + ["department", "list"])

    assert result.exit_code == 0
    assert "Academics" in result.output
    assert "Marketing & Social Media" in result.output
    assert "₹25,00,000" in result.output
    assert (tmp_path / "cli-data").exists()


def test_department_add_and_duplicate(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["department", "add", "Research", "--budget", "₹10,00,000"])
    assert result.exit_code == 0
    assert "Created department 'Research' with monthly budget ₹10,00,000" in result.output

    result = cli_runner.invoke(cli, cli_env + ["department", "add", "research", "--budget", "5000"])
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = cli_runner.invoke(cli, cli_env + ["department", "list"])
    assert result.output.count("Research") == 1


def test_invalid_amount_is_rejected(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["department", "add", "Research", "--budget", "lots"])

    assert result.exit_code == 2
    assert "Invalid value" in result.output


def test_department_rename_moves_expenses(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["department", "update", "Tech", "--name", "Engineering"])
    assert result.exit_code == 0
    assert "Updated department 'Engineering'" in result.output

    result = cli_runner.invoke(cli, cli_env + ["expense", "list", "--department", "Engineering"])
    assert "AWS Cloud Hosting" in result.output


def test_department_delete_blocked_by_active_employee(cli_runner, cli_env):
    """Test a department can be deleted once its last active member leaves."""
    result = cli_runner.invoke(cli, cli_env + ["department", "delete", "Tech", "--yes"])
    assert result.exit_code == 1
    assert "Error:" in result.output

    result = cli_runner.invoke(cli, cli_env + ["employee", "terminate", "7", "--date", "2025-10-31"])
    assert result.exit_code == 0
    assert "Terminated 'Karan Mehra'" in result.output

    result = cli_runner.invoke(cli, cli_env + ["department", "delete", "Tech", "--yes"])
    assert result.exit_code == 0
    assert "Deleted department 'Tech'" in result.output


def test_employee_add_and_show(cli_runner, cli_env):
    result = cli_runner.invoke(
        cli,
        cli_env
        + [
            "employee",
            "add",
            "Asha Rao",
            "--role",
            "Editor",
            "--allocation",
            "Editing=50,000",
            "--allocation",
            "Content=10000",
            "--email",
            "asha@example.com",
        ],
    )
    assert result.exit_code == 0
    assert "Added employee 'Asha Rao'" in result.output
    assert "in Editing, ₹7,20,000/yr" in result.output
    employee_id = re.search(r"\(ID: ([^)]+)\)", result.output).group(1)

    result = cli_runner.invoke(cli, cli_env + ["employee", "show", employee_id])
    assert result.exit_code == 0
    assert "asha@example.com" in result.output
    assert "₹6,00,000/yr" in result.output
    assert "₹1,20,000/yr" in result.output


def test_employee_add_unknown_department(cli_runner, cli_env):
    result = cli_runner.invoke(
        cli, cli_env + ["employee", "add", "Asha", "--role", "Editor", "--allocation", "Nowhere=100"]
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_employee_list_filters_by_status(cli_runner, cli_env):
    cli_runner.invoke(cli, cli_env + ["employee", "terminate", "2", "--date", "2025-10-31"])

    result = cli_runner.invoke(cli, cli_env + ["employee", "list", "--status", "terminated"])

    assert result.exit_code == 0
    assert "Priya Verma" in result.output
    assert "Arjun Sharma" not in result.output


def test_expense_add_list_and_delete(cli_runner, cli_env):
    result = cli_runner.invoke(
        cli,
        cli_env
        + [
            "expense",
            "add",
            "Cab to client",
            "--amount",
            "Rs. 1,200",
            "--department",
            "Sales",
            "--category",
            "travel",
            "--date",
            "2025-10-20",
        ],
    )
    assert result.exit_code == 0
    assert "Added expense 'Cab to client' of ₹1,200 to Sales" in result.output
    expense_id = re.search(r"\(ID: ([^)]+)\)", result.output).group(1)

    result = cli_runner.invoke(cli, cli_env + ["expense", "list", "--year", "2025", "--month", "10", "--category", "Travel"])
    assert result.exit_code == 0
    assert "Cab to client" in result.output
    assert "Sales Team Offsite - Goa" in result.output
    assert "2 expenses, total ₹2,51,200" in result.output

    result = cli_runner.invoke(cli, cli_env + ["expense", "delete", expense_id, "missing"])
    assert result.exit_code == 0
    assert "Deleted 1 expense" in result.output
    assert "1 ID(s) not found" in result.output


def test_expense_add_rejects_salary_category(cli_runner, cli_env):
    result = cli_runner.invoke(
        cli, cli_env + ["expense", "add", "Sneaky", "--amount", "10", "--department", "Tech", "--category", "Salary"]
    )

    assert result.exit_code == 2


def test_payroll_pay_logs_salary_expense(cli_runner, cli_env):
    result = cli_runner.invoke(
        cli, cli_env + ["payroll", "pay", "1", "--amount", "2,00,000", "--date", "2025-10-31"]
    )

    assert result.exit_code == 0
    assert "Paid ₹2,00,000 (Salary) on 2025-10-31" in result.output
    assert "'Salary - Arjun Sharma' in Academics" in result.output

    result = cli_runner.invoke(cli, cli_env + ["expense", "list", "--category", "Salary"])
    assert "Salary - Arjun Sharma" in result.output


def test_payroll_pay_terminated_employee_fails(cli_runner, cli_env):
    cli_runner.invoke(cli, cli_env + ["employee", "terminate", "1", "--date", "2025-10-01"])

    result = cli_runner.invoke(cli, cli_env + ["payroll", "pay", "1", "--amount", "100"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_payroll_run_pays_every_active_employee(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["payroll", "run", "--yes", "--date", "2025-10-31"])

    assert result.exit_code == 0
    assert "Salary - Karan Mehra" in result.output
    assert "Paid 9 employees, total ₹14,41,667" in result.output


def test_payroll_run_cancelled(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["payroll", "run", "--employee", "1=1000"], input="n\n")

    assert result.exit_code == 0
    assert "Payroll cancelled." in result.output

    result = cli_runner.invoke(cli, cli_env + ["expense", "list", "--category", "Salary"])
    assert "No expenses found." in result.output


def test_payroll_run_confirms_total_before_paying(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["payroll", "run", "--date", "2025-10-31"], input="y\n")

    assert result.exit_code == 0
    assert "Pay 9 employees a total of ₹14,41,667?" in result.output
    assert "Paid 9 employees, total ₹14,41,667" in result.output

    result = cli_runner.invoke(cli, cli_env + ["expense", "list", "--category", "Salary"])
    assert "9 expenses, total ₹14,41,667" in result.output


def test_dashboard_month(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["dashboard", "--year", "2025", "--month", "October"])

    assert result.exit_code == 0
    assert "Dashboard - October 2025" in result.output
    assert "₹19,00,000" in result.output
    assert "₹2,25,00,000" in result.output
    assert "Designing" in result.output


def test_dashboard_month_and_all_months_conflict(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["dashboard", "--month", "10", "--all-months"])

    assert result.exit_code == 1


def test_trend_for_year(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["trend", "--year", "2025", "--department", "Tech"])

    assert result.exit_code == 0
    assert "Monthly spend 2025 - Tech" in result.output
    assert "Oct" in result.output
    assert "₹85,000" in result.output


def test_analyze_without_key_fails(cli_runner, cli_env):
    result = cli_runner.invoke(cli, cli_env + ["analyze", "--year", "2025", "--month", "10"])

    assert result.exit_code == 1
    assert "Analysis unavailable" in result.output


def test_analyze_with_client(cli_runner, cli_env):
    """Test the analyst receives the period's figures and its answer is shown."""
    answer = json.dumps(
        {
            "summary": "Spending is on track.",
            "recommendations": ["Review software licences", "Plan Q4 hiring"],
            "riskLevel": "medium",
        }
    )
    client, completions = fake_client(answer)
    analyst = FinancialAnalyst(client=client)

    result = cli_runner.invoke(
        cli, cli_env + ["analyze", "--year", "2025", "--month", "10"], obj={"analyst": analyst}
    )

    assert result.exit_code == 0
    assert "AI analysis (risk: Medium)" in result.output
    assert "Spending is on track." in result.output
    assert "  * Plan Q4 hiring" in result.output
    (request,) = completions.requests
    assert "Organization overview for October 2025" in request["messages"][1]["content"]


def test_analyze_unknown_department(cli_runner, cli_env):
    client, completions = fake_client("{}")

    result = cli_runner.invoke(
        cli,
        cli_env + ["analyze", "--department", "Nope"],
        obj={"analyst": FinancialAnalyst(client=client)},
    )

    assert result.exit_code == 1
    assert "Department 'Nope' not found" in result.output
    assert completions.requests == []


def test_remote_mode_persists_to_database(cli_runner, cli_env, tmp_path):
    """Test changes go to the database and no local snapshot is written."""
    url = sqlite_url(tmp_path / "remote.db")
    args = cli_env + ["--database-url", url]

    result = cli_runner.invoke(cli, args + ["department", "add", "Research", "--budget", "1000"])
    assert result.exit_code == 0
    assert "Warning" not in result.output

    result = cli_runner.invoke(cli, args + ["department", "list"])
    assert "Research" in result.output
    assert "Academics" in result.output
    assert not (tmp_path / "cli-data").exists()


def test_remote_mode_prints_stored_ids(cli_runner, cli_env, tmp_path):
    """Test IDs printed by add commands can be used in later commands."""
    args = cli_env + ["--database-url", sqlite_url(tmp_path / "remote.db")]

    result = cli_runner.invoke(
        cli, args + ["employee", "add", "Asha Rao", "--role", "Editor", "--allocation", "Tech=50000"]
    )
    assert result.exit_code == 0
    employee_id = re.search(r"\(ID: ([^)]+)\)", result.output).group(1)
    assert not employee_id.startswith("tmp-")

    result = cli_runner.invoke(cli, args + ["employee", "show", employee_id])
    assert result.exit_code == 0
    assert "Asha Rao" in result.output

    result = cli_runner.invoke(
        cli, args + ["expense", "add", "Cab", "--amount", "500", "--department", "Sales", "--date", "2025-10-02"]
    )
    assert result.exit_code == 0
    expense_id = re.search(r"\(ID: ([^)]+)\)", result.output).group(1)
    assert not expense_id.startswith("tmp-")

    result = cli_runner.invoke(cli, args + ["expense", "delete", expense_id])
    assert "Deleted 1 expense" in result.output

def test_corrupt_snapshot_reports_error(cli_runner, cli_env, tmp_path):
    cli_runner.invoke(cli, cli_env + ["department", "list"])
    (tmp_path / "cli-data" / "PAYDESK_DB_V1.json").write_text("{not json", encoding="utf-8")

    result = cli_runner.invoke(cli, cli_env + ["department", "list"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_data_dir_from_environment(cli_runner, clean_env, tmp_path):
    clean_env.setenv("PAYDESK_DATA_DIR", str(tmp_path / "env-data"))

    result = cli_runner.invoke(cli, ["department", "add", "Research", "--budget", "1000"])

    assert result.exit_code == 0
    assert (tmp_path / "env-data" / "PAYDESK_DB_V1.json").exists()
