"""Command-line interface for bodytrack."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from rich.console import Console

from bodytrack.config import get_settings
from bodytrack.data.backup import export_backup, parse_backup
from bodytrack.data.csv_import import export_csv, parse_csv, parse_date
from bodytrack.db import get_db
from bodytrack.db.queries import (
    EvaluationQueries,
    NutritionLogQueries,
    ProfileQueries,
    WeightQueries,
)
from bodytrack.errors import BodyTrackError
from bodytrack.export.formatters import TableFormatter
from bodytrack.nutrition.models import FoodItem, MealType, NutritionGoals
from bodytrack.nutrition.service import NutritionLogService
from bodytrack.profiles.evaluation import EvaluationDraft
from bodytrack.profiles.training import calculate_training_years, get_experience_level
from bodytrack.tracking import (
    ExperienceLevel,
    GoalType,
    Sex,
    UserProfile,
    WeightEntry,
    calculate_statistics,
    detect_anomalies,
    get_smart_insights,
    get_weekly_analysis,
    plan_bulk,
)
from bodytrack.tracking.bulk_plan import Scenario

app = typer.Typer(
    help="Body weight and nutrition tracking with trend analytics",
    no_args_is_help=True,
)
console = Console()
formatter = TableFormatter(console)

# Subcommand groups
profile_app = typer.Typer(help="Manage the user profile")
weight_app = typer.Typer(help="Log, edit and move weight entries")
evaluate_app = typer.Typer(help="Nutrition evaluation: body fat, TDEE and macros")
food_app = typer.Typer(help="Manage custom foods")
log_app = typer.Typer(help="Daily nutrition log")

app.add_typer(profile_app, name="profile")
app.add_typer(weight_app, name="weight")
app.add_typer(evaluate_app, name="evaluate")
app.add_typer(food_app, name="food")
app.add_typer(log_app, name="log")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else get_settings().logging.level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2, default=str)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> NoReturn:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        response = {"success": False, "command": command, "errors": [message]}
        if suggestions:
            response["suggestions"] = suggestions
        output_json(response)
    else:
        console.print(f"[red]{message}[/red]")
        for suggestion in suggestions or []:
            console.print(f"[dim]{suggestion}[/dim]")
    raise typer.Exit(1)


def parse_date_option(value: Optional[str]) -> date:
    """Parse a --date option (yyyy-mm-dd or dd/mm/yyyy), defaulting to today."""
    if not value:
        return date.today()
    try:
        return parse_date(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def require_profile(conn: sqlite3.Connection, command: str, json_output: bool) -> UserProfile:
    profile = ProfileQueries.get_profile(conn)
    if profile is None:
        fail(
            command,
            "No user profile found",
            json_output,
            ["Create a profile first: bodytrack profile create NAME --start-weight KG"],
        )
    return profile


def resolve_entry_id(conn: sqlite3.Connection, prefix: str, command: str, json_output: bool) -> str:
    """Accept a full entry id or an unambiguous prefix of one."""
    matches = [e.id for e in WeightQueries.list_entries(conn) if e.id.startswith(prefix)]
    if len(matches) != 1:
        reason = "No weight entry" if not matches else "Ambiguous weight entry id"
        fail(command, f"{reason}: {prefix}", json_output)
    return matches[0]


def load_service(conn: sqlite3.Connection) -> NutritionLogService:
    default_goals = get_settings().nutrition.to_goals()
    return NutritionLogService(NutritionLogQueries.load_state(conn, default_goals))


def parse_meal(value: str) -> MealType:
    try:
        return MealType(value.lower().replace("-", "_"))
    except ValueError:
        names = ", ".join(t.value for t in MealType)
        raise typer.BadParameter(f"Unknown meal '{value}'. Use one of: {names}") from None


def find_food(service: NutritionLogService, prefix: str) -> Optional[FoodItem]:
    """Look a food up by id prefix among custom and recent foods."""
    for food in [*service.custom_foods, *service.recent_foods]:
        if food.id.startswith(prefix):
            return food
    return None


def find_food_entry_id(service: NutritionLogService, log_date: date, meal: MealType, prefix: str) -> Optional[str]:
    log = service.get_log(log_date)
    meal_log = log.get_meal(meal) if log else None
    if meal_log is None:
        return None
    for entry in meal_log.foods:
        if entry.id.startswith(prefix):
            return entry.id
    return None


# ============================================================================
# Profile
# ============================================================================


@profile_app.command("create")
def profile_create(
    name: str = typer.Argument(..., help="Your name"),
    start_weight: float = typer.Option(..., "--start-weight", "-w", help="Starting weight in kg"),
    goal: GoalType = typer.Option(GoalType.BULK, "--goal", "-g", help="bulk, cut or maintenance"),
    start_date: Optional[str] = typer.Option(None, "--start-date", help="Start date (default: today)"),
    target_weight: Optional[float] = typer.Option(None, "--target", "-t", help="Target weight in kg"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    sex: Optional[str] = typer.Option(None, "--sex", help="male or female"),
    bulk_months: Optional[int] = typer.Option(None, "--bulk-months", help="Planned bulk duration"),
    gym_start: Optional[str] = typer.Option(
        None, "--gym-start", help="Date you started training, sets experience level"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create (or replace) the user profile."""
    experience = None
    if gym_start:
        experience = get_experience_level(calculate_training_years(parse_date_option(gym_start)))

    try:
        profile = UserProfile(
            name=name,
            goal_type=goal,
            start_weight=start_weight,
            start_date=parse_date_option(start_date),
            target_weight=target_weight,
            height=height,
            age=age,
            gender=sex.lower() if sex else None,
            bulk_duration_months=bulk_months,
            experience_level=experience,
        )
    except ValueError as e:
        fail("profile create", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        ProfileQueries.save_profile(conn, profile)

    if json_output:
        output_json({
            "success": True,
            "command": "profile create",
            "data": profile.to_dict(),
            "human_summary": f"Created profile for {name} ({goal.value})",
        })
    else:
        console.print(f"[green]Created profile for {name}[/green]")
        formatter.profile(profile)


@profile_app.command("show")
def profile_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the user profile."""
    db = get_db()
    with db.get_connection() as conn:
        profile = require_profile(conn, "profile show", json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "profile show",
            "data": profile.to_dict(),
            "human_summary": f"{profile.name}: {profile.current_weight:.1f} kg ({profile.goal_type.value})",
        })
    else:
        formatter.profile(profile)


@profile_app.command("update")
def profile_update(
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    goal: Optional[GoalType] = typer.Option(None, "--goal", "-g", help="bulk, cut or maintenance"),
    target_weight: Optional[float] = typer.Option(None, "--target", "-t", help="Target weight in kg"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    sex: Optional[str] = typer.Option(None, "--sex", help="male or female"),
    bulk_months: Optional[int] = typer.Option(None, "--bulk-months", help="Planned bulk duration"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Update fields of the user profile."""
    db = get_db()
    with db.get_connection() as conn:
        profile = require_profile(conn, "profile update", json_output)

        if name is not None:
            profile.name = name
        if goal is not None:
            profile.goal_type = goal
        if target_weight is not None:
            profile.target_weight = target_weight
        if height is not None:
            profile.height = height
        if age is not None:
            profile.age = age
        if sex is not None:
            try:
                profile.gender = Sex(sex.lower())
            except ValueError as e:
                fail("profile update", str(e), json_output)
        if bulk_months is not None:
            profile.bulk_duration_months = bulk_months

        profile.updated_at = datetime.now()
        ProfileQueries.save_profile(conn, profile)

    if json_output:
        output_json({
            "success": True,
            "command": "profile update",
            "data": profile.to_dict(),
            "human_summary": f"Updated profile for {profile.name}",
        })
    else:
        console.print("[green]Profile updated[/green]")
        formatter.profile(profile)


# ============================================================================
# Weight entries
# ============================================================================


@weight_app.command("add")
def weight_add(
    weight: float = typer.Argument(..., help="Weight in kg"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    cheat_meal: bool = typer.Option(False, "--cheat", help="Day after a cheat meal"),
    retention: bool = typer.Option(False, "--retention", help="Water retention day"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a weight entry."""
    entry = WeightEntry(
        date=parse_date_option(date_str),
        weight=weight,
        is_cheat_meal=cheat_meal,
        is_retention=retention,
        notes=notes,
    )

    db = get_db()
    with db.get_connection() as conn:
        require_profile(conn, "weight add", json_output)
        try:
            WeightQueries.add_entry(conn, entry)
        except BodyTrackError as e:
            fail("weight add", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "weight add",
            "data": entry.to_dict(),
            "human_summary": f"Logged {weight:.1f} kg on {entry.date.isoformat()}",
        })
    else:
        console.print(f"[green]Logged:[/green] {weight:.1f} kg on {entry.date.isoformat()}")


@weight_app.command("list")
def weight_list(
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Only the last N days"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List weight entries, oldest first."""
    start = date.today() - timedelta(days=days - 1) if days else None

    db = get_db()
    with db.get_connection() as conn:
        entries = WeightQueries.list_entries(conn, start_date=start)

    if json_output:
        output_json({
            "success": True,
            "command": "weight list",
            "data": {"entries": [e.to_dict() for e in entries]},
            "human_summary": f"{len(entries)} entries",
        })
    elif not entries:
        console.print("No weight entries found")
    else:
        formatter.entries(entries)


@weight_app.command("edit")
def weight_edit(
    entry_id: str = typer.Argument(..., help="Entry ID (or unique prefix)"),
    weight: Optional[float] = typer.Option(None, "--weight", "-w", help="New weight in kg"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="New date"),
    cheat_meal: Optional[bool] = typer.Option(None, "--cheat/--no-cheat", help="Cheat meal flag"),
    retention: Optional[bool] = typer.Option(None, "--retention/--no-retention", help="Retention flag"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="New notes"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Edit a weight entry."""
    changes: dict = {}
    if weight is not None:
        changes["weight"] = weight
    if date_str is not None:
        changes["date"] = parse_date_option(date_str)
    if cheat_meal is not None:
        changes["is_cheat_meal"] = cheat_meal
    if retention is not None:
        changes["is_retention"] = retention
    if notes is not None:
        changes["notes"] = notes or None

    if not changes:
        fail("weight edit", "Nothing to change", json_output)

    db = get_db()
    with db.get_connection() as conn:
        full_id = resolve_entry_id(conn, entry_id, "weight edit", json_output)
        try:
            entry = WeightQueries.update_entry(conn, full_id, **changes)
        except BodyTrackError as e:
            fail("weight edit", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "weight edit",
            "data": entry.to_dict(),
            "human_summary": f"Updated entry {entry.id[:8]}",
        })
    else:
        console.print(f"[green]Updated:[/green] {entry.date.isoformat()} {entry.weight:.1f} kg")


@weight_app.command("delete")
def weight_delete(
    entry_id: str = typer.Argument(..., help="Entry ID (or unique prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete a weight entry."""
    db = get_db()
    with db.get_connection() as conn:
        full_id = resolve_entry_id(conn, entry_id, "weight delete", json_output)
        WeightQueries.delete_entry(conn, full_id)

    if json_output:
        output_json({
            "success": True,
            "command": "weight delete",
            "data": {"id": full_id},
            "human_summary": f"Deleted entry {full_id[:8]}",
        })
    else:
        console.print(f"[green]Deleted entry {full_id[:8]}[/green]")


@weight_app.command("import")
def weight_import(
    csv_file: Path = typer.Argument(..., help="CSV file to import", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Import weight entries from CSV (added to the existing history)."""
    try:
        result = parse_csv(csv_file.read_text(encoding="utf-8"))
    except BodyTrackError as e:
        fail("weight import", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        require_profile(conn, "weight import", json_output)
        count = WeightQueries.add_entries(conn, result.entries)

    if json_output:
        output_json({
            "success": True,
            "command": "weight import",
            "data": {"imported": count, "warnings": result.errors},
            "human_summary": f"Imported {count} entries, skipped {len(result.errors)} rows",
        })
    else:
        console.print(f"[green]Imported {count} entries[/green]")
        for warning in result.errors:
            console.print(f"[yellow]{warning}[/yellow]")


@weight_app.command("export")
def weight_export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write (default: stdout)"),
) -> None:
    """Export weight entries as CSV."""
    db = get_db()
    with db.get_connection() as conn:
        text = export_csv(WeightQueries.list_entries(conn))

    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Exported to {output}[/green]")
    else:
        print(text, end="")


@weight_app.command("backup")
def weight_backup(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write (default: stdout)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Write a JSON backup of profile, entries and evaluation."""
    db = get_db()
    with db.get_connection() as conn:
        profile = require_profile(conn, "weight backup", json_output)
        text = export_backup(
            profile,
            WeightQueries.list_entries(conn),
            EvaluationQueries.get_evaluation(conn),
        )

    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Backup written to {output}[/green]")
    else:
        print(text)


@weight_app.command("restore")
def weight_restore(
    backup_file: Path = typer.Argument(..., help="Backup JSON file", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Restore profile, entries and evaluation from a backup (replaces them)."""
    try:
        backup = parse_backup(backup_file.read_text(encoding="utf-8"))
    except BodyTrackError as e:
        fail("weight restore", str(e), json_output)

    db = get_db()
    with db.get_connection() as conn:
        try:
            count = WeightQueries.replace_all(conn, backup.entries)
            ProfileQueries.save_profile(conn, backup.profile)
            if backup.evaluation is not None:
                EvaluationQueries.save_evaluation(conn, backup.evaluation)
        except BodyTrackError as e:
            fail("weight restore", str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": "weight restore",
            "data": {"entries": count, "evaluation": backup.evaluation is not None},
            "human_summary": f"Restored {count} entries for {backup.profile.name}",
        })
    else:
        console.print(f"[green]Restored {count} entries for {backup.profile.name}[/green]")


# ============================================================================
# Analytics
# ============================================================================


def _load_history(command: str, json_output: bool) -> tuple[UserProfile, list[WeightEntry]]:
    db = get_db()
    with db.get_connection() as conn:
        profile = require_profile(conn, command, json_output)
        entries = WeightQueries.list_entries(conn)
    return profile, entries


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show weight statistics and projections."""
    profile, entries = _load_history("stats", json_output)
    statistics = calculate_statistics(entries, profile.goal_type, profile.target_weight)

    if json_output:
        output_json({
            "success": True,
            "command": "stats",
            "data": statistics.to_dict(),
            "human_summary": (
                f"{statistics.total_entries} entries, "
                f"{statistics.weekly_average_change:+.2f} kg/week"
            ),
        })
    else:
        formatter.statistics(statistics)


@app.command()
def insights(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show goal-aware insights about your progress."""
    profile, entries = _load_history("insights", json_output)
    statistics = calculate_statistics(entries, profile.goal_type, profile.target_weight)
    messages = get_smart_insights(entries, statistics, profile.goal_type)

    if json_output:
        output_json({
            "success": True,
            "command": "insights",
            "data": {"insights": messages},
            "human_summary": f"{len(messages)} insights",
        })
    else:
        formatter.insights(messages)


@app.command()
def anomalies(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Find days that look like unflagged cheat meals or water retention."""
    _, entries = _load_history("anomalies", json_output)
    report = detect_anomalies(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "anomalies",
            "data": {
                "possible_cheat_meals": report.possible_cheat_meals,
                "possible_retentions": report.possible_retentions,
            },
            "human_summary": (
                f"{len(report.possible_cheat_meals)} possible cheat meals, "
                f"{len(report.possible_retentions)} possible retentions"
            ),
        })
    else:
        formatter.anomalies(report, entries)


@app.command()
def weekly(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Summarise entries by calendar week."""
    _, entries = _load_history("weekly", json_output)
    weeks = get_weekly_analysis(entries)

    if json_output:
        output_json({
            "success": True,
            "command": "weekly",
            "data": {
                "weeks": [
                    {
                        "week_start": w.week_start.isoformat(),
                        "week_end": w.week_end.isoformat(),
                        "average_weight": w.average_weight,
                        "weight_change": w.weight_change,
                        "entries": w.entries,
                        "cheat_meals": w.cheat_meals,
                        "retentions": w.retentions,
                    }
                    for w in weeks
                ]
            },
            "human_summary": f"{len(weeks)} weeks",
        })
    elif not weeks:
        console.print("No weight entries found")
    else:
        formatter.weekly(weeks)


@app.command("bulk-plan")
def bulk_plan(
    months: Optional[int] = typer.Option(
        None, "--months", "-m", min=1, max=12, help="Planned bulk length (default: profile or 3)"
    ),
    level: Optional[ExperienceLevel] = typer.Option(
        None, "--level", "-l", help="beginner, intermediate or advanced (default: profile)"
    ),
    save: bool = typer.Option(False, "--save", help="Store months and level in the profile"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recommended gain rate, current progress and projections for a bulk."""
    db = get_db()
    with db.get_connection() as conn:
        profile = require_profile(conn, "bulk-plan", json_output)
        entries = WeightQueries.list_entries(conn)
        plan = plan_bulk(profile, entries, level=level, months=months)

        if save:
            profile.bulk_duration_months = plan.duration_months
            profile.experience_level = plan.experience_level
            profile.updated_at = datetime.now()
            ProfileQueries.save_profile(conn, profile)

    if json_output:
        optimal = plan.projection(Scenario.OPTIMAL)
        output_json({
            "success": True,
            "command": "bulk-plan",
            "data": plan.to_dict(),
            "human_summary": (
                f"{plan.duration_months}-month {plan.experience_level.value} bulk: "
                f"{optimal.final_weight:.1f} kg at the optimal rate"
            ),
        })
    else:
        formatter.bulk_plan(plan)
        if save:
            console.print("[green]Bulk settings saved to your profile[/green]")


# ============================================================================
# Nutrition evaluation
# ============================================================================


@evaluate_app.command("run")
def evaluate_run(
    form_file: Path = typer.Argument(..., help="YAML evaluation form", exists=True, dir_okay=False),
    apply_goals: bool = typer.Option(
        False, "--apply-goals", help="Use the macros for your profile goal as nutrition goals"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Run a nutrition evaluation from a YAML form and store it."""
    try:
        with open(form_file) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        fail("evaluate run", f"Invalid YAML in {form_file}: {e}", json_output)

    if not isinstance(data, dict):
        fail("evaluate run", f"{form_file} must contain a mapping of form fields", json_output)

    try:
        evaluation = EvaluationDraft.from_dict(data).commit()
    except (BodyTrackError, ValueError, TypeError) as e:
        fail("evaluate run", str(e), json_output)

    calculated = evaluation.calculated
    db = get_db()
    with db.get_connection() as conn:
        # Resolve the profile before anything is written
        profile = require_profile(conn, "evaluate run", json_output) if apply_goals else None

        EvaluationQueries.save_evaluation(conn, evaluation)

        if profile is not None:
            macros = calculated.macros[profile.goal_type]
            service = load_service(conn)
            service.set_goals(
                NutritionGoals(
                    calories=macros.calories,
                    protein=macros.protein,
                    carbs=macros.carbs,
                    fat=macros.fat,
                    water=service.goals.water,
                    source="evaluation",
                )
            )
            NutritionLogQueries.save_state(conn, service.snapshot())

    if json_output:
        output_json({
            "success": True,
            "command": "evaluate run",
            "data": calculated.to_dict(),
            "human_summary": (
                f"Body fat {calculated.body_fat_percentage:.1f}%, "
                f"TDEE {calculated.effective_tdee} kcal"
            ),
        })
    else:
        formatter.calculated(calculated)
        if apply_goals:
            console.print("[green]Nutrition goals updated from the evaluation[/green]")


@evaluate_app.command("show")
def evaluate_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the stored evaluation's results."""
    db = get_db()
    with db.get_connection() as conn:
        evaluation = EvaluationQueries.get_evaluation(conn)

    if evaluation is None or evaluation.calculated is None:
        fail(
            "evaluate show",
            "No nutrition evaluation found",
            json_output,
            ["Run one first: bodytrack evaluate run FORM.yaml"],
        )

    if json_output:
        output_json({
            "success": True,
            "command": "evaluate show",
            "data": evaluation.calculated.to_dict(),
            "human_summary": f"TDEE {evaluation.calculated.effective_tdee} kcal",
        })
    else:
        formatter.calculated(evaluation.calculated)


# ============================================================================
# Custom foods
# ============================================================================


@food_app.command("add-custom")
def food_add_custom(
    name: str = typer.Argument(..., help="Food name"),
    calories: float = typer.Option(..., "--calories", help="kcal per 100 g"),
    protein: float = typer.Option(..., "--protein", help="Protein g per 100 g"),
    carbs: float = typer.Option(..., "--carbs", help="Carbs g per 100 g"),
    fat: float = typer.Option(..., "--fat", help="Fat g per 100 g"),
    category: str = typer.Option("other", "--category", help="Food category"),
    brand: Optional[str] = typer.Option(None, "--brand", help="Brand"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a custom food (nutrients per 100 g)."""
    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        food = service.add_custom_food(
            name, calories, protein, carbs, fat, category=category, brand=brand
        )
        NutritionLogQueries.save_state(conn, service.snapshot())

    if json_output:
        output_json({
            "success": True,
            "command": "food add-custom",
            "data": food.to_dict(),
            "human_summary": f"Added {name} ({food.id[:8]})",
        })
    else:
        console.print(f"[green]Added custom food {name}[/green] [dim]{food.id[:8]}[/dim]")


@food_app.command("list")
def food_list(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List custom and recently used foods."""
    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)

    custom = service.custom_foods
    recent = [f for f in service.recent_foods if not f.is_custom]

    if json_output:
        output_json({
            "success": True,
            "command": "food list",
            "data": {
                "custom_foods": [f.to_dict() for f in custom],
                "recent_foods": [f.to_dict() for f in service.recent_foods],
            },
            "human_summary": f"{len(custom)} custom foods",
        })
    else:
        formatter.foods(custom, recent)


@food_app.command("remove")
def food_remove(
    food_id: str = typer.Argument(..., help="Food ID (or unique prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Remove a custom food. Past log entries are not affected."""
    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        matches = [f.id for f in service.custom_foods if f.id.startswith(food_id)]
        if len(matches) != 1:
            fail("food remove", f"No single custom food matches {food_id}", json_output)
        service.remove_custom_food(matches[0])
        NutritionLogQueries.save_state(conn, service.snapshot())

    if json_output:
        output_json({
            "success": True,
            "command": "food remove",
            "data": {"id": matches[0]},
            "human_summary": f"Removed food {matches[0][:8]}",
        })
    else:
        console.print(f"[green]Removed food {matches[0][:8]}[/green]")


# ============================================================================
# Daily nutrition log
# ============================================================================


def _print_day(command: str, service: NutritionLogService, log_date: date, json_output: bool) -> None:
    log = service.get_log(log_date)
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": log.to_dict() if log else None,
            "human_summary": (
                f"{log.total_calories} / {log.target_calories:.0f} kcal on {log_date.isoformat()}"
                if log
                else f"No log for {log_date.isoformat()}"
            ),
        })
    elif log is None:
        console.print(f"No nutrition log for {log_date.isoformat()}")
    else:
        formatter.day_log(log)


@log_app.command("show")
def log_show(
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a day's meals and totals."""
    log_date = parse_date_option(date_str)
    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
    _print_day("log show", service, log_date, json_output)


@log_app.command("add")
def log_add(
    meal: str = typer.Argument(..., help="breakfast, lunch, dinner, snacks, pre_workout, post_workout"),
    food_id: str = typer.Argument(..., help="Food ID (or unique prefix) from 'food list'"),
    grams: float = typer.Argument(..., help="Quantity in grams"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a food to a meal."""
    meal_type = parse_meal(meal)
    log_date = parse_date_option(date_str)

    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        food = find_food(service, food_id)
        if food is None:
            fail("log add", f"No food matches {food_id}", json_output, ["See: bodytrack food list"])
        try:
            service.add_food_to_meal(log_date, meal_type, food, grams)
        except ValueError as e:
            fail("log add", str(e), json_output)
        NutritionLogQueries.save_state(conn, service.snapshot())

    _print_day("log add", service, log_date, json_output)


@log_app.command("remove")
def log_remove(
    meal: str = typer.Argument(..., help="Meal the food is in"),
    entry_id: str = typer.Argument(..., help="Food entry ID (or unique prefix)"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Remove a food from a meal."""
    meal_type = parse_meal(meal)
    log_date = parse_date_option(date_str)

    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        full_id = find_food_entry_id(service, log_date, meal_type, entry_id)
        if full_id is None:
            fail("log remove", f"No food entry {entry_id} in {meal_type.value}", json_output)
        service.remove_food_from_meal(log_date, meal_type, full_id)
        NutritionLogQueries.save_state(conn, service.snapshot())

    _print_day("log remove", service, log_date, json_output)


@log_app.command("update")
def log_update(
    meal: str = typer.Argument(..., help="Meal the food is in"),
    entry_id: str = typer.Argument(..., help="Food entry ID (or unique prefix)"),
    grams: float = typer.Argument(..., help="New quantity in grams"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Change the quantity of a logged food."""
    meal_type = parse_meal(meal)
    log_date = parse_date_option(date_str)

    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        full_id = find_food_entry_id(service, log_date, meal_type, entry_id)
        if full_id is None:
            fail("log update", f"No food entry {entry_id} in {meal_type.value}", json_output)
        try:
            service.update_food_in_meal(log_date, meal_type, full_id, grams)
        except ValueError as e:
            fail("log update", str(e), json_output)
        NutritionLogQueries.save_state(conn, service.snapshot())

    _print_day("log update", service, log_date, json_output)


@log_app.command("water")
def log_water(
    remove: bool = typer.Option(False, "--remove", help="Remove a glass instead of adding one"),
    glasses: Optional[int] = typer.Option(None, "--set", help="Set the number of glasses"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a glass of water (or remove one, or set the count)."""
    log_date = parse_date_option(date_str)

    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        if glasses is not None:
            service.get_or_create_log(log_date)
            service.set_water_glasses(log_date, glasses)
        elif remove:
            service.remove_water(log_date)
        else:
            service.add_water(log_date)
        NutritionLogQueries.save_state(conn, service.snapshot())

    _print_day("log water", service, log_date, json_output)


@log_app.command("notes")
def log_notes(
    text: str = typer.Argument(..., help="Notes for the day (empty to clear)"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Set the notes of a day."""
    log_date = parse_date_option(date_str)

    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        service.get_or_create_log(log_date)
        service.set_day_notes(log_date, text or None)
        NutritionLogQueries.save_state(conn, service.snapshot())

    _print_day("log notes", service, log_date, json_output)


@log_app.command("goals")
def log_goals(
    calories: Optional[float] = typer.Option(None, "--calories", help="Daily kcal"),
    protein: Optional[float] = typer.Option(None, "--protein", help="Daily protein (g)"),
    carbs: Optional[float] = typer.Option(None, "--carbs", help="Daily carbs (g)"),
    fat: Optional[float] = typer.Option(None, "--fat", help="Daily fat (g)"),
    water: Optional[int] = typer.Option(None, "--water", help="Daily glasses of water"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show or set the goals new days are created with."""
    db = get_db()
    with db.get_connection() as conn:
        service = load_service(conn)
        goals = service.goals
        if any(v is not None for v in (calories, protein, carbs, fat, water)):
            goals = NutritionGoals(
                calories=goals.calories if calories is None else calories,
                protein=goals.protein if protein is None else protein,
                carbs=goals.carbs if carbs is None else carbs,
                fat=goals.fat if fat is None else fat,
                water=goals.water if water is None else water,
                source="manual",
            )
            service.set_goals(goals)
            NutritionLogQueries.save_state(conn, service.snapshot())

    if json_output:
        output_json({
            "success": True,
            "command": "log goals",
            "data": goals.to_dict(),
            "human_summary": f"{goals.calories:.0f} kcal, {goals.protein:.0f} g protein",
        })
    else:
        console.print(
            f"Goals ({goals.source}): {goals.calories:.0f} kcal, P {goals.protein:.0f} g, "
            f"C {goals.carbs:.0f} g, F {goals.fat:.0f} g, water {goals.water} glasses"
        )


if __name__ == "__main__":
    app()
