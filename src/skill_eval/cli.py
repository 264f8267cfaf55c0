"""
cli.py – Interactive skill assessment in the terminal

Run:
    skill-eval                 # live backend when Azure OpenAI is configured
    skill-eval --mock          # rule-based backend, no credentials needed
    skill-eval --db data.db    # persist profiles / tests / attempts in SQLite

Flow: profile intake → question generation → answering → skill report.
"""

from __future__ import annotations

import argparse
import logging
import os
import time
from typing import Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from skill_eval.aggregator import rating_for
from skill_eval.backends import get_backend
from skill_eval.config import Settings, get_settings
from skill_eval.errors import InvalidProfile, SkillEvalError
from skill_eval.models import (
    MAX_DURATION,
    MIN_DURATION,
    Answer,
    EvaluationResult,
    ExperienceLevel,
    GeneratedTest,
    QuestionType,
)
from skill_eval.repository import InMemoryRepository, Repository, SqliteRepository
from skill_eval.service import AssessmentService

console = Console()

RATING_STYLE = {
    "Excellent":         "bold green",
    "Very Good":         "green",
    "Good":              "cyan",
    "Average":           "yellow",
    "Needs Improvement": "bold red",
}


# ─── Wiring ──────────────────────────────────────────────────────────────────

def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def build_service(settings: Settings, repository: Optional[Repository] = None) -> AssessmentService:
    """Wire repository + backend from settings."""
    if repository is None:
        repository = (
            SqliteRepository(settings.app.db_path) if settings.app.db_path
            else InMemoryRepository()
        )
    backend = get_backend(settings)
    return AssessmentService(
        repository, backend, backend, max_workers=settings.scoring.max_workers
    )


# ─── Display helpers ─────────────────────────────────────────────────────────

def _bar(pct: int, width: int = 20) -> str:
    filled = round(pct / 100 * width)
    return "█" * filled + "░" * (width - filled) + f" {pct}%"


def show_test(test: GeneratedTest) -> None:
    meta = test.metadata
    table = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
    table.add_column("Key",   style="bold cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Questions", str(meta.total_questions))
    table.add_row("Estimated time", f"{meta.total_time} min")
    table.add_row("Skills", ", ".join(f"{s} ×{n}" for s, n in meta.skill_distribution.items()))
    table.add_row("Difficulty", ", ".join(f"{d} ×{n}" for d, n in meta.difficulty_distribution.items()))
    console.print(Panel(table, title="[bold]Generated Test[/bold]", border_style="magenta"))


def show_report(result: EvaluationResult) -> None:
    console.print()
    overall = rating_for(result.overall_score)
    style   = RATING_STYLE.get(overall, "bold")
    console.rule(f"[bold magenta]Overall score: {result.overall_score}%[/bold magenta] "
                 f"[{style}]{overall}[/{style}]")

    skills = Table(box=box.SIMPLE_HEAVY, title="Skill breakdown")
    skills.add_column("Skill", style="bold")
    skills.add_column("Score", justify="right")
    skills.add_column("Progress")
    skills.add_column("Rating")
    for skill, agg in result.skill_breakdown.items():
        style = RATING_STYLE.get(agg.rating, "white")
        skills.add_row(
            skill,
            f"{agg.total_score:g}/{agg.max_score}",
            _bar(agg.percentage),
            f"[{style}]{agg.rating}[/{style}]",
        )
    console.print(skills)

    console.print(Panel("\n".join(f"✓ {s}" for s in result.strengths),
                        title="Strengths", border_style="green"))
    if result.weaknesses:
        console.print(Panel("\n".join(f"✗ {w}" for w in result.weaknesses),
                            title="Weaknesses", border_style="red"))
    recs = []
    for rec in result.recommendations:
        recs.append(f"[bold]{rec.title}[/bold] — {rec.description}")
        recs.extend(f"   • {r}" for r in rec.resources or [])
    console.print(Panel("\n".join(recs), title="Recommendations", border_style="cyan"))
    console.print(Panel(result.detailed_feedback, title="Summary", border_style="magenta"))


# ─── Interactive steps ───────────────────────────────────────────────────────

def _split(text: str) -> list[str]:
    return [t.strip() for t in text.split(",") if t.strip()]


def intake(service: AssessmentService, user_id: str):
    """Ask for the profile fields until they validate."""
    console.print(Panel("[bold magenta]Skill Assessment — Requirements[/bold magenta]", expand=False))
    while True:
        role  = Prompt.ask("[cyan]1.[/cyan] Role", default="Full-Stack Developer")
        level = Prompt.ask(
            "[cyan]2.[/cyan] Experience level",
            choices=[lvl.value for lvl in ExperienceLevel],
            default=ExperienceLevel.MID.value,
        )
        stack = Prompt.ask(
            "[cyan]3.[/cyan] Tech stack [dim](comma-separated)[/dim]",
            default="React, Node.js, TypeScript",
        )
        types = Prompt.ask(
            "[cyan]4.[/cyan] Question types "
            f"[dim]({', '.join(t.value for t in QuestionType)})[/dim]",
            default="mcq, theory",
        )
        duration = IntPrompt.ask(
            f"[cyan]5.[/cyan] Duration in minutes [dim]({MIN_DURATION}–{MAX_DURATION})[/dim]",
            default=30,
        )
        refinement = Prompt.ask("[cyan]6.[/cyan] Anything to focus on? [dim](optional)[/dim]",
                                default="")
        try:
            return service.create_profile(
                user_id,
                role=role,
                experience_level=level,
                tech_stack=_split(stack),
                question_types=_split(types),
                duration=duration,
                refinement=refinement or None,
            )
        except InvalidProfile as exc:
            for violation in exc.violations:
                console.print(f"[red]✗ {violation}[/red]")
            console.print()


def take_test(test: GeneratedTest) -> list[Answer]:
    answers: list[Answer] = []
    for n, question in enumerate(test.questions, 1):
        console.print()
        console.rule(f"[bold]Question {n}/{len(test.questions)}[/bold] "
                     f"[dim]{question.type} · {', '.join(question.skills)} · "
                     f"{question.points} pts[/dim]")
        console.print(f"[bold]{question.title}[/bold]")
        if question.content and question.content != question.title:
            console.print(question.content)
        for option in question.options or []:
            console.print(f"  {option}")
        started = time.monotonic()
        text = Prompt.ask("[cyan]Your answer[/cyan] [dim](blank to skip)[/dim]", default="")
        if text.strip():
            answers.append(Answer(
                question_id=question.id,
                answer=text,
                time_spent=int(time.monotonic() - started),
            ))
    return answers


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="skill-eval", description="Interactive skill assessment in the terminal")
    ap.add_argument("--mock", action="store_true", help="Force the rule-based backend")
    ap.add_argument("--db", help="SQLite file for persistence (default: in-memory)")
    ap.add_argument("--user", default=os.getenv("USER", "local-user"), help="User id")
    args = ap.parse_args(argv)

    if args.mock:
        os.environ["FORCE_MOCK_MODE"] = "true"
    if args.db:
        os.environ["SKILL_EVAL_DB_PATH"] = args.db

    settings = get_settings()
    configure_logging(settings.app.log_level)
    for service_name, status in settings.status_summary().items():
        console.print(f"[dim]{service_name}:[/dim] {status}")

    service = build_service(settings)
    try:
        profile = intake(service, args.user)
        with console.status("[bold blue]Generating questions…"):
            test = service.generate_test(profile.id)
        show_test(test)
        if not Confirm.ask("Start the test now?", default=True):
            return 0

        attempt = service.start_attempt(test.id, args.user)
        answers = take_test(test)
        with console.status("[bold blue]Scoring answers…"):
            attempt = service.submit_attempt(attempt.id, answers)
    except SkillEvalError as exc:
        console.print(f"[bold red]✗ {exc}[/bold red]")
        return 1

    show_report(attempt.evaluation)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
