"""Rich console output for weight statistics, nutrition logs and evaluations."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bodytrack.nutrition.models import DailyLog, FoodItem
from bodytrack.profiles.evaluation import CalculatedData
from bodytrack.tracking.bulk_plan import BulkPlan
from bodytrack.tracking.models import (
    AnomalyReport,
    Statistics,
    UserProfile,
    WeeklyAnalysis,
    WeightEntry,
)


def _opt(value: Optional[float], fmt: str = "{:.1f}", suffix: str = "") -> str:
    return "-" if value is None else fmt.format(value) + suffix


class TableFormatter:
    """Format tracking data as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def profile(self, profile: UserProfile) -> None:
        lines = [
            f"[bold]{profile.name}[/bold]",
            f"Goal: {profile.goal_type.value}",
            f"Start: {profile.start_weight:.1f} kg on {profile.start_date.isoformat()}",
            f"Current: {profile.current_weight:.1f} kg",
        ]
        if profile.target_weight:
            lines.append(f"Target: {profile.target_weight:.1f} kg")
        if profile.height:
            lines.append(f"Height: {profile.height:.0f} cm")
        if profile.age:
            lines.append(f"Age: {profile.age}")
        if profile.gender:
            lines.append(f"Sex: {profile.gender.value}")
        if profile.experience_level:
            lines.append(f"Experience: {profile.experience_level.value}")
        self.console.print(Panel("\n".join(lines), title="Profile"))

    def entries(self, entries: list[WeightEntry], title: str = "Weight History") -> None:
        table = Table(title=title)
        table.add_column("Date", style="cyan")
        table.add_column("Weight", justify="right")
        table.add_column("Flags")
        table.add_column("Notes", max_width=40)
        table.add_column("ID", style="dim")

        for entry in entries:
            flags = []
            if entry.is_cheat_meal:
                flags.append("[yellow]cheat[/yellow]")
            if entry.is_retention:
                flags.append("[magenta]retention[/magenta]")
            table.add_row(
                entry.date.isoformat(),
                f"{entry.weight:.1f}",
                " ".join(flags),
                entry.notes or "",
                entry.id[:8],
            )

        self.console.print(table)

    def statistics(self, stats: Statistics) -> None:
        table = Table(title="Statistics")
        table.add_column("Metric")
        table.add_column("Value", justify="right")

        table.add_row("Entries", str(stats.total_entries))
        table.add_row("Days tracked", str(stats.days_tracked))
        table.add_row("Average weight", f"{stats.average_weight:.2f} kg")
        table.add_row("Total change", f"{stats.weight_change:+.2f} kg")
        table.add_row("Weekly change", f"{stats.weekly_average_change:+.3f} kg/week")
        table.add_row("Monthly change", f"{stats.monthly_average_change:+.2f} kg/month")
        table.add_row("7-day average", f"{stats.moving_average_7:.2f} kg")
        table.add_row("14-day average", f"{stats.moving_average_14:.2f} kg")
        table.add_row("30-day average", f"{stats.moving_average_30:.2f} kg")
        table.add_row("Cheat meals", str(stats.cheat_meal_count))
        table.add_row("Retentions", str(stats.retention_count))
        table.add_row("Consistency", f"{stats.consistency_score:.0f}%")
        table.add_row("Projected in 30 days", _opt(stats.projected_weight_30_days, suffix=" kg"))
        table.add_row("Days to goal", _opt(stats.estimated_days_to_goal, "{:.0f}"))

        self.console.print(table)

    def insights(self, insights: list[str]) -> None:
        if not insights:
            self.console.print("[dim]Not enough data for insights yet.[/dim]")
            return
        for line in insights:
            self.console.print(f"• {line}")

    def anomalies(self, report: AnomalyReport, entries: list[WeightEntry]) -> None:
        if report.is_empty:
            self.console.print("[green]No unflagged anomalies found.[/green]")
            return

        by_id = {e.id: e for e in entries}
        table = Table(title="Possible Unflagged Days")
        table.add_column("Date", style="cyan")
        table.add_column("Weight", justify="right")
        table.add_column("Looks like")
        table.add_column("ID", style="dim")

        for kind, ids in (
            ("cheat meal", report.possible_cheat_meals),
            ("retention", report.possible_retentions),
        ):
            for entry_id in ids:
                entry = by_id[entry_id]
                table.add_row(entry.date.isoformat(), f"{entry.weight:.1f}", kind, entry.id[:8])

        self.console.print(table)

    def weekly(self, weeks: list[WeeklyAnalysis]) -> None:
        table = Table(title="Weekly Analysis")
        table.add_column("Week", style="cyan")
        table.add_column("Average", justify="right")
        table.add_column("Change", justify="right")
        table.add_column("Entries", justify="right")
        table.add_column("Cheat", justify="right")
        table.add_column("Retention", justify="right")

        for week in weeks:
            table.add_row(
                f"{week.week_start.isoformat()} - {week.week_end.isoformat()}",
                f"{week.average_weight:.2f}",
                f"{week.weight_change:+.2f}",
                str(week.entries),
                str(week.cheat_meals),
                str(week.retentions),
            )

        self.console.print(table)

    def day_log(self, log: DailyLog) -> None:
        header = (
            f"[bold]{log.date.isoformat()}[/bold]\n"
            f"Calories: {log.total_calories} / {log.target_calories:.0f} kcal\n"
            f"Protein: {log.total_protein:.1f} / {log.target_protein:.0f} g   "
            f"Carbs: {log.total_carbs:.1f} / {log.target_carbs:.0f} g   "
            f"Fat: {log.total_fat:.1f} / {log.target_fat:.0f} g\n"
            f"Water: {log.water_glasses} / {log.water_target} glasses"
        )
        if log.notes:
            header += f"\nNotes: {log.notes}"
        self.console.print(Panel(header, title="Nutrition Log"))

        for meal in log.meals:
            table = Table(title=f"{meal.name} ({meal.type.value})")
            table.add_column("Food", style="cyan", max_width=40)
            table.add_column("Grams", justify="right")
            table.add_column("kcal", justify="right")
            table.add_column("P", justify="right")
            table.add_column("C", justify="right")
            table.add_column("F", justify="right")
            table.add_column("ID", style="dim")

            for entry in meal.foods:
                table.add_row(
                    entry.food_item.name,
                    f"{entry.grams:.0f}",
                    str(entry.calories),
                    f"{entry.protein:.1f}",
                    f"{entry.carbs:.1f}",
                    f"{entry.fat:.1f}",
                    entry.id[:8],
                )
            table.add_row(
                "[bold]TOTAL[/bold]",
                "",
                f"[bold]{meal.total_calories}[/bold]",
                f"{meal.total_protein:.1f}",
                f"{meal.total_carbs:.1f}",
                f"{meal.total_fat:.1f}",
                "",
                style="bold",
            )
            self.console.print(table)

    def calculated(self, data: CalculatedData) -> None:
        breakdown = data.tdee_breakdown
        lines = [
            f"Body fat: {data.body_fat_percentage:.1f}%",
            f"Lean mass: {data.lean_mass:.1f} kg   Fat mass: {data.fat_mass:.1f} kg",
            f"BMR: {data.bmr} kcal",
            f"TDEE: {data.tdee} kcal "
            f"(BMR {breakdown.bmr} + NEAT {breakdown.neat} + "
            f"weights {breakdown.weights} + cardio {breakdown.cardio})",
        ]
        if data.real_tdee:
            lines.append(f"Real TDEE (from bulk progress): {data.real_tdee} kcal")
        if data.training:
            training = data.training
            lines.append(
                f"Training: {training.training_years:.1f} years "
                f"({training.experience_level.value})"
            )
            lines.append(
                f"Natural potential: {training.max_lean_mass:.1f} kg lean mass, "
                f"~{training.yearly_muscle_gain:g} kg muscle this year"
            )
        self.console.print(Panel("\n".join(lines), title="Evaluation"))

        table = Table(title="Macro Targets")
        table.add_column("Goal", style="cyan")
        table.add_column("kcal", justify="right")
        table.add_column("Protein (g)", justify="right")
        table.add_column("Carbs (g)", justify="right")
        table.add_column("Fat (g)", justify="right")

        for goal, macros in data.macros.items():
            table.add_row(
                goal.value,
                str(macros.calories),
                str(macros.protein),
                str(macros.carbs),
                str(macros.fat),
            )

        self.console.print(table)

    def foods(self, custom: list[FoodItem], recent: list[FoodItem]) -> None:
        """Custom foods first, then recently used ones (per 100 g)."""
        table = Table(title="Foods (per 100 g)")
        table.add_column("Name", style="cyan")
        table.add_column("kcal", justify="right")
        table.add_column("P", justify="right")
        table.add_column("C", justify="right")
        table.add_column("F", justify="right")
        table.add_column("Source")
        table.add_column("ID", style="dim")

        for food in [*custom, *recent]:
            table.add_row(
                food.name,
                f"{food.calories:.0f}",
                f"{food.protein:.1f}",
                f"{food.carbs:.1f}",
                f"{food.fat:.1f}",
                "custom" if food.is_custom else "recent",
                food.id[:8],
            )

        self.console.print(table)

    def bulk_plan(self, plan: BulkPlan) -> None:
        header = (
            f"Experience: {plan.experience_level.value}\n"
            f"Recommended gain: {plan.recommended.label}\n"
            f"Planned length: {plan.duration_months} months"
        )
        progress = plan.progress
        if progress:
            header += (
                f"\n\nProgress: {progress.weight_gained:+.2f} kg in "
                f"{progress.months_elapsed:.1f} months ({progress.weeks_elapsed:.1f} weeks)\n"
                f"Rate: {progress.weekly_rate:.3f} kg/week, {progress.monthly_rate:.2f} kg/month"
            )
        self.console.print(Panel(header, title="Bulk Plan"))

        table = Table(title=f"Projections for {plan.duration_months} months")
        table.add_column("Scenario", style="cyan")
        table.add_column("kg/week", justify="right")
        table.add_column("kg/month", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("Final weight", justify="right")

        for projection in plan.projections:
            table.add_row(
                projection.scenario.value,
                f"{projection.weekly_gain:.2f}",
                f"{projection.monthly_gain:.2f}",
                f"{projection.total_gain:+.1f}",
                f"{projection.final_weight:.1f}",
            )

        self.console.print(table)
