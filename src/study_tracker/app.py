"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from study_tracker.auth import IdentityProvider
from study_tracker.db import init_db, DEFAULT_DB_PATH
from study_tracker.icons import resolve_icon, selectable_icons
from study_tracker.models import Subject, Topic, TopicStatus
from study_tracker.store import EntityStore
from study_tracker.tracker import SyllabusTracker
from study_tracker.trends import PERIODS

console = Console()

STATUS_CYCLE = {
    TopicStatus.NOT_STARTED: TopicStatus.IN_PROGRESS,
    TopicStatus.IN_PROGRESS: TopicStatus.COMPLETED,
    TopicStatus.COMPLETED: TopicStatus.NOT_STARTED,
}

STATUS_COLORS = {
    TopicStatus.NOT_STARTED: "red",
    TopicStatus.IN_PROGRESS: "yellow",
    TopicStatus.COMPLETED: "green",
}

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user backs out of a prompt to return to the menu."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def next_status(status: TopicStatus) -> TopicStatus:
    return STATUS_CYCLE[status]


def progress_bar(percent: int, width: int = 20) -> str:
    filled = percent * width // 100
    return f"[cyan]{'█' * filled}{'░' * (width - filled)}[/cyan]"


def show_welcome(tracker: SyllabusTracker):
    identity = tracker.identity
    who = (identity.name or identity.key) if identity else "Guest"
    console.print(Panel(
        f"[bold]Study Tracker[/bold]\n[dim]Signed in as {who}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("dashboard", "Overall progress + trend"),
        ("subjects", "Syllabus breakdown"),
        ("add-subject", "Create a subject"),
        ("add-topic", "Add a topic to a subject"),
        ("delete-topic", "Remove a topic"),
        ("advance", "Move a topic to its next status"),
        ("set-status", "Set a topic's status"),
        ("signup", "Create an account"),
        ("login", "Sign in"),
        ("logout", "Sign out (back to guest)"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")
    console.print("  [dim]Type q or menu at any prompt to come back here.[/dim]")


def pick_subject(tracker: SyllabusTracker) -> Subject | None:
    subjects = tracker.subjects
    if not subjects:
        console.print("[yellow]No subjects yet. Use 'add-subject' first.[/yellow]")
        return None
    for i, s in enumerate(subjects, 1):
        console.print(f"  [cyan]{i}[/cyan]) {resolve_icon(s.icon)} {s.name}")
    choice = session_prompt("Subject", choices=[str(i) for i in range(1, len(subjects) + 1)])
    return subjects[int(choice) - 1]


def pick_topic(subject: Subject) -> Topic | None:
    if not subject.topics:
        console.print(f"[yellow]{subject.name} has no topics.[/yellow]")
        return None
    for i, t in enumerate(subject.topics, 1):
        color = STATUS_COLORS[t.status]
        console.print(f"  [cyan]{i}[/cyan]) {t.name} [{color}]({t.status.value})[/{color}]")
    choice = session_prompt("Topic", choices=[str(i) for i in range(1, len(subject.topics) + 1)])
    return subject.topics[int(choice) - 1]


def cmd_dashboard(tracker: SyllabusTracker):
    stats = tracker.stats()
    console.print(Panel(
        f"Overall Completion: [bold]{stats.overall_completion}%[/bold] {progress_bar(stats.overall_completion)}",
        title="Progress Dashboard", border_style="blue",
    ))
    table = Table()
    table.add_column("Completed", justify="right", style="green")
    table.add_column("In Progress", justify="right", style="yellow")
    table.add_column("Not Started", justify="right", style="red")
    table.add_column("Total Topics", justify="right")
    table.add_row(
        str(stats.completed_topics), str(stats.in_progress_topics),
        str(stats.not_started_topics), str(stats.total_topics),
    )
    console.print(table)

    period = session_prompt("Trend period", choices=list(PERIODS), default="daily")
    trend = Table(title=f"Topics Completed ({period})")
    trend.add_column("Period")
    trend.add_column("Topics", justify="right")
    trend.add_column("")
    buckets = tracker.trend(period)
    peak = max(b["completed"] for b in buckets) or 1
    for bucket in buckets:
        trend.add_row(bucket["label"], str(bucket["completed"]), "█" * (bucket["completed"] * 20 // peak))
    console.print(trend)


def cmd_subjects(tracker: SyllabusTracker):
    if not tracker.subjects:
        console.print("[yellow]No subjects yet.[/yellow]")
        return
    for subject in tracker.subjects:
        percent = tracker.subject_completion(subject.id)
        table = Table(title=f"{resolve_icon(subject.icon)} {subject.name} — {percent}%", title_justify="left")
        table.add_column("Topic")
        table.add_column("Status")
        for topic in subject.topics:
            color = STATUS_COLORS[topic.status]
            table.add_row(topic.name, f"[{color}]{topic.status.value}[/{color}]")
        console.print(table)


def cmd_add_subject(tracker: SyllabusTracker):
    name = session_prompt("Subject name").strip()
    if not name:
        console.print("[red]A subject needs a name.[/red]")
        return
    icons = selectable_icons()
    for key in icons:
        console.print(f"  {resolve_icon(key)} [cyan]{key}[/cyan]")
    icon = session_prompt("Icon", choices=icons, default=icons[0])
    subject = tracker.add_subject(name, icon)
    console.print(f"[green]Added subject {subject.name}[/green]")


def cmd_add_topic(tracker: SyllabusTracker):
    subject = pick_subject(tracker)
    if subject is None:
        return
    name = session_prompt("Topic name").strip()
    if not name:
        console.print("[red]A topic needs a name.[/red]")
        return
    tracker.add_topic(subject.id, name)
    console.print(f"[green]Added {name} to {subject.name}[/green]")


def cmd_delete_topic(tracker: SyllabusTracker):
    subject = pick_subject(tracker)
    topic = pick_topic(subject) if subject else None
    if topic is None:
        return
    tracker.delete_topic(subject.id, topic.id)
    console.print(f"[green]Deleted {topic.name}[/green]")


def cmd_advance(tracker: SyllabusTracker):
    subject = pick_subject(tracker)
    topic = pick_topic(subject) if subject else None
    if topic is None:
        return
    status = next_status(topic.status)
    tracker.update_topic_status(subject.id, topic.id, status)
    console.print(f"{topic.name} → [{STATUS_COLORS[status]}]{status.value}[/{STATUS_COLORS[status]}]")


def cmd_set_status(tracker: SyllabusTracker):
    subject = pick_subject(tracker)
    topic = pick_topic(subject) if subject else None
    if topic is None:
        return
    value = session_prompt("New status", choices=[s.value for s in TopicStatus])
    tracker.update_topic_status(subject.id, topic.id, value)
    console.print(f"{topic.name} → {value}")


def cmd_signup(tracker: SyllabusTracker, auth: IdentityProvider):
    name = session_prompt("Name")
    email = session_prompt("Email")
    password = session_prompt("Password", password=True)
    result = auth.sign_up(name, email, password)
    _finish_auth(tracker, result)


def cmd_login(tracker: SyllabusTracker, auth: IdentityProvider):
    email = session_prompt("Email")
    password = session_prompt("Password", password=True)
    result = auth.login(email, password)
    _finish_auth(tracker, result)


def _finish_auth(tracker: SyllabusTracker, result):
    if not result.success:
        console.print(f"[red]{result.message}[/red]")
        return
    tracker.switch_identity(result.identity)
    console.print(f"[green]{result.message}[/green]")


def cmd_logout(tracker: SyllabusTracker, auth: IdentityProvider):
    auth.logout()
    tracker.switch_identity(None)
    console.print("[dim]Signed out. Showing the guest syllabus.[/dim]")


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    auth = IdentityProvider(db_path)
    tracker = SyllabusTracker(EntityStore(db_path, auth.current_identity()))

    show_welcome(tracker)

    commands = {
        "dashboard": lambda: cmd_dashboard(tracker),
        "subjects": lambda: cmd_subjects(tracker),
        "add-subject": lambda: cmd_add_subject(tracker),
        "add-topic": lambda: cmd_add_topic(tracker),
        "delete-topic": lambda: cmd_delete_topic(tracker),
        "advance": lambda: cmd_advance(tracker),
        "set-status": lambda: cmd_set_status(tracker),
        "signup": lambda: cmd_signup(tracker, auth),
        "login": lambda: cmd_login(tracker, auth),
        "logout": lambda: cmd_logout(tracker, auth),
    }

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        try:
            if choice in commands:
                commands[choice]()
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Keep going, see you next time![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            continue
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
