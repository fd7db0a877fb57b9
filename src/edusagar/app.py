"""Interactive CLI application."""
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from edusagar.badges import BADGE_CATALOG
from edusagar.config import RewardConfig, build_reward_config, get_settings
from edusagar.dashboard import (
    get_leaderboard, get_monthly_progress, get_next_milestone, get_progress_color,
    get_study_stats, get_weekly_progress,
)
from edusagar.db import init_db
from edusagar.flashcards import get_due_cards, record_flashcard_result
from edusagar.importer import import_content
from edusagar.logging_setup import configure_logging
from edusagar.models import ActivityResult
from edusagar.progress import (
    award_monthly_bonus, award_weekly_bonus, create_user, get_month_points,
    get_user_progress, link_wallet, record_activity,
)
from edusagar.quiz import get_quiz_score, get_quizzes, record_quiz_answer
from edusagar.rewards import calculate_weekly_reward
from edusagar.seed import seed_all

console = Console()


def show_welcome(name: str):
    console.print(Panel(
        f"[bold]EduSagar[/bold]\n[dim]Welcome back, {name}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("lesson", "Complete a lesson"),
        ("module", "Complete a module"),
        ("course", "Complete a course"),
        ("quiz", "Take a quiz"),
        ("flashcards", "Review due flashcards"),
        ("import", "Import generated course content"),
        ("dashboard", "Points, streak and rewards"),
        ("badges", "Badge collection"),
        ("leaderboard", "Top learners"),
        ("wallet", "Link a wallet address"),
        ("award", "Pay out earned bonuses"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_activity(result: ActivityResult | None) -> None:
    if result is None:
        console.print("[red]Could not record activity.[/red]")
        return
    console.print(f"[green]+{result.points_earned} points[/green] (total {result.total_points})")
    if result.streak_broken:
        console.print("[yellow]Streak reset. Start a new one today![/yellow]")
    else:
        console.print(f"[dim]Streak: {result.streak} days[/dim]")
    for badge_id in result.new_badges:
        badge = BADGE_CATALOG.get(badge_id)
        console.print(f"[bold magenta]New badge:[/bold magenta] {badge.name if badge else badge_id}")


def cmd_activity(db_path: str, user_id: str, kind: str, config: RewardConfig):
    show_activity(record_activity(db_path, user_id, kind, datetime.now(), config))


def run_quiz_session(db_path: str, user_id: str, quizzes: list, config: RewardConfig) -> tuple[int, int]:
    if not quizzes:
        console.print("[yellow]No quizzes available! Import course content first.[/yellow]")
        return 0, 0
    correct = 0
    console.print(f"\n[bold]Quiz[/bold] ({len(quizzes)} questions)\n")
    for i, quiz in enumerate(quizzes, 1):
        console.print(f"[bold]Q{i}.[/bold] {quiz.question}\n")
        letters = [chr(ord("a") + n) for n in range(len(quiz.options))]
        for letter, option in zip(letters, quiz.options):
            console.print(f"  [cyan]{letter})[/cyan] {option}")
        letter = Prompt.ask("\nYour answer", choices=letters)
        answer = quiz.options[letters.index(letter)]
        if record_quiz_answer(db_path, user_id, quiz, answer, datetime.now(), config):
            console.print(f"[green]Correct! +{config.quiz_correct} points[/green]")
            correct += 1
        else:
            console.print(f"[red]Incorrect.[/red] Answer: [green]{quiz.answer}[/green]")
        console.print()
    console.print(f"[bold]Score: {correct}/{len(quizzes)} ({correct/len(quizzes)*100:.0f}%)[/bold]")
    console.print(f"[dim]Overall quiz score: {get_quiz_score(db_path, user_id)}%[/dim]\n")
    return correct, len(quizzes)


def cmd_quiz(db_path: str, user_id: str, config: RewardConfig):
    course_id = Prompt.ask("Course id (blank for all)", default="") or None
    count = IntPrompt.ask("Number of questions", default=5)
    run_quiz_session(db_path, user_id, get_quizzes(db_path, course_id, count), config)


def run_flashcard_session(db_path: str, user_id: str, cards: list, config: RewardConfig) -> int:
    if not cards:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return 0
    console.print(f"\n[bold]Flashcard Session[/bold] ({len(cards)} cards)\n")
    reviewed = 0
    for i, card in enumerate(cards, 1):
        console.print(Panel(card.front, title=f"Card {i}/{len(cards)}", border_style="cyan"))
        Prompt.ask("[dim]Press Enter to reveal answer[/dim]")
        console.print(Panel(card.back, border_style="green"))
        rating = IntPrompt.ask(
            "Rate yourself (0=forgot, 3=hard, 4=good, 5=easy)", choices=["0", "1", "2", "3", "4", "5"],
        )
        updated = record_flashcard_result(db_path, user_id, card.id, rating, datetime.now(), config)
        if updated:
            reviewed += 1
            console.print(f"[dim]Next review in {updated.interval} day(s)[/dim]\n")
    return reviewed


def cmd_flashcards(db_path: str, user_id: str, config: RewardConfig):
    console.print("\n[bold]Flashcard Review[/bold]")
    course_id = Prompt.ask("Course id (blank for all)", default="") or None
    cards = get_due_cards(db_path, course_id, datetime.now(), limit=15)
    run_flashcard_session(db_path, user_id, cards, config)


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    course_id = Prompt.ask("Course id", default=Path(file_path).stem)
    result = import_content(db_path, course_id, file_path)
    console.print(
        f"[green]Imported {result['flashcards']} flashcards and {result['quizzes']} quizzes "
        f"from {result['filename']} into {course_id}[/green]"
    )


def cmd_dashboard(db_path: str, user_id: str, config: RewardConfig):
    user = get_user_progress(db_path, user_id)
    if user is None:
        console.print("[red]No profile found.[/red]")
        return
    month_points = get_month_points(db_path, user_id)
    weekly_pct = get_weekly_progress(user, config)
    monthly_pct = get_monthly_progress(month_points, config)
    stats = get_study_stats(db_path, user_id)

    console.print(Panel(
        f"[bold]{user.total_points}[/bold] points  |  Streak [bold]{user.streak}[/bold] days",
        title=f"{user.name or user.id}'s Progress", border_style="blue",
    ))
    for label, pct in (("Weekly goal", weekly_pct), ("Monthly goal", monthly_pct)):
        color = get_progress_color(pct)
        filled = int(pct / 5)
        bar = f"[{color}]{'█' * filled}{'░' * (20 - filled)}[/{color}]"
        console.print(f"  {label:<13} {bar} [{color}]{pct}%[/{color}]")

    console.print(f"\n  [dim]{calculate_weekly_reward(user.weekly_points, config).message}[/dim]")
    milestone = get_next_milestone(user, month_points, config)
    console.print(f"  [cyan]Next: {milestone['message']} (+{milestone['reward']})[/cyan]")
    console.print(f"\n  Lessons: [bold]{stats['lessons_completed']}[/bold]  |  "
                  f"Flashcards: [bold]{stats['flashcards_reviewed']}[/bold]  |  "
                  f"Quiz answers: [bold]{stats['quiz_answers']}[/bold]")


def cmd_badges(db_path: str, user_id: str):
    user = get_user_progress(db_path, user_id)
    held = set(user.badges) if user else set()
    table = Table(title="Badges")
    table.add_column("Badge", style="cyan")
    table.add_column("Description")
    table.add_column("Earned")
    for badge in BADGE_CATALOG.values():
        table.add_row(badge.name, badge.description, "[green]yes[/green]" if badge.id in held else "")
    console.print(table)


def cmd_leaderboard(db_path: str):
    table = Table(title="Leaderboard")
    table.add_column("Rank", justify="right")
    table.add_column("Learner")
    table.add_column("Points", justify="right")
    table.add_column("Streak", justify="right")
    for row in get_leaderboard(db_path, limit=10):
        table.add_row(str(row["rank"]), row["name"] or row["id"], str(row["total_points"]), str(row["streak"]))
    console.print(table)


def cmd_wallet(db_path: str, user_id: str):
    address = Prompt.ask("Wallet address").strip()
    if not address:
        return
    if link_wallet(db_path, user_id, address):
        console.print("[green]Wallet linked. Identity Verified badge unlocked![/green]")
    else:
        console.print("[red]Could not link wallet.[/red]")


def cmd_award(db_path: str, user_id: str, config: RewardConfig):
    for reward in (award_weekly_bonus(db_path, user_id, config=config),
                   award_monthly_bonus(db_path, user_id, config=config)):
        if reward is None:
            console.print("[red]Could not evaluate reward.[/red]")
        elif reward.bonus_awarded:
            console.print(f"[green]{reward.message}[/green]")
        else:
            console.print(f"[dim]{reward.message}[/dim]")


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    config = build_reward_config(settings)
    db_path = settings.db_path
    user_id = settings.user_id
    init_db(db_path)
    seed_all(db_path)
    user = create_user(db_path, user_id, settings.user_name)
    if user is None:
        console.print(f"[red]Could not load or create the profile for {user_id}. Check {db_path}.[/red]")
        return

    show_welcome(user.name or user_id)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        try:
            if choice == "lesson":
                cmd_activity(db_path, user_id, "lesson_complete", config)
            elif choice == "module":
                cmd_activity(db_path, user_id, "module_complete", config)
            elif choice == "course":
                cmd_activity(db_path, user_id, "course_complete", config)
            elif choice == "quiz":
                cmd_quiz(db_path, user_id, config)
            elif choice == "flashcards":
                cmd_flashcards(db_path, user_id, config)
            elif choice == "import":
                cmd_import(db_path)
            elif choice == "dashboard":
                cmd_dashboard(db_path, user_id, config)
            elif choice == "badges":
                cmd_badges(db_path, user_id)
            elif choice == "leaderboard":
                cmd_leaderboard(db_path)
            elif choice == "wallet":
                cmd_wallet(db_path, user_id)
            elif choice == "award":
                cmd_award(db_path, user_id, config)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Keep learning![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
