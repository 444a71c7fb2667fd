"""Interactive CLI application."""
from pathlib import Path

from loguru import logger
from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from devsecops_tutor import catalog
from devsecops_tutor.config import Settings, get_settings
from devsecops_tutor.dashboard import (
    get_pace_color, get_progress_color, get_progress_label, get_study_stats, get_tier_progress,
)
from devsecops_tutor.generator import ContentGenerator, GenerationError
from devsecops_tutor.glossary import annotated_terms, render_markers
from devsecops_tutor.logging_config import setup_logging
from devsecops_tutor.models import Diagram
from devsecops_tutor.pace import format_estimate
from devsecops_tutor.progress import ProgressStore
from devsecops_tutor.quiz import apply_suggestion, is_correct
from devsecops_tutor.review import get_due_topics, get_mastered_topics, get_review_queue
from devsecops_tutor.study import StudySession

console = Console()

EXIT_WORDS = ("q", "menu")
DEFAULT_PLAYGROUND_FILE = "solution.txt"
SEVERITY_COLORS = {
    "CRITICAL": "bold red",
    "HIGH": "red",
    "MEDIUM": "yellow",
    "LOW": "cyan",
    "INFO": "dim",
}


class SessionExitRequested(Exception):
    """Raised when the learner types q/menu at a prompt inside a session."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    while True:
        answer = session_prompt(prompt).strip()
        if answer in choices:
            return int(answer)
        console.print(f"[red]Please choose one of: {', '.join(choices)}[/red]")


def show_welcome():
    console.print(Panel(
        "[bold]DevSecOps Academy[/bold]\n[dim]AI-guided learning console[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("topics", "Browse and search topics"),
        ("learn", "Study a topic"),
        ("review", "Topics due for review"),
        ("bookmarks", "Bookmarked topics"),
        ("glossary", "DevSecOps glossary"),
        ("vulns", "Recent CVEs + OWASP Top 10"),
        ("news", "DevSecOps news summary"),
        ("pace", "Learning pace + completion estimate"),
        ("dashboard", "Progress overview"),
        ("certify", "Final certification challenge"),
        ("reset", "Reset progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def topic_badges(store: ProgressStore, topic: str, due: set[str]) -> str:
    badges = []
    if store.is_completed(topic):
        badges.append("[green]✓[/green]")
    if topic in due:
        badges.append("[yellow]↻ due[/yellow]")
    if store.is_bookmarked(topic):
        badges.append("[magenta]★[/magenta]")
    return " ".join(badges)


def show_annotated(text: str, glossary: dict[str, str]) -> None:
    """Print annotated Markdown with term hints listed underneath."""
    console.print(Markdown(render_markers(text)))
    terms = [t for t in annotated_terms(text) if t in glossary]
    if terms:
        table = Table(title="Terms in this answer", show_header=False, border_style="dim")
        table.add_column("Term", style="bold cyan")
        table.add_column("Definition")
        for term in terms:
            table.add_row(term, glossary[term])
        console.print(table)


def show_diagram(diagram: Diagram) -> None:
    flow = " [dim]→[/dim] ".join(f"[bold cyan]{node.label}[/bold cyan]" for node in diagram.nodes)
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Step", style="cyan", justify="right")
    table.add_column("Stage", style="bold")
    table.add_column("Detail", style="dim")
    for i, node in enumerate(diagram.nodes, 1):
        table.add_row(str(i), node.label, node.tooltip)
    console.print(Panel(Group(flow, "", table), title=diagram.title, border_style="cyan"))


def pick_topic(store: ProgressStore, topics: list[str] | None = None) -> str:
    topics = topics or list(catalog.ALL_TOPICS)
    due = store.due_topics()
    for i, topic in enumerate(topics, 1):
        console.print(f"  [cyan]{i:>2}[/cyan]) {topic} {topic_badges(store, topic, due)}")
    choice = session_int_prompt("Select topic", choices=[str(i) for i in range(1, len(topics) + 1)])
    return topics[choice - 1]


def run_quiz_session(session: StudySession) -> None:
    with console.status("Creating a quiz..."):
        questions = session.generate_quiz()
    while questions:
        answers = []
        console.print(f"\n[bold]Quiz:[/bold] {len(questions)} questions\n")
        for i, q in enumerate(questions, 1):
            console.print(f"[bold]Q{i}.[/bold] {q.question}\n")
            for n, option in enumerate(q.options, 1):
                console.print(f"  [cyan]{n})[/cyan] {option}")
            choice = session_int_prompt("\nYour answer", choices=[str(n) for n in range(1, len(q.options) + 1)])
            answer = q.options[choice - 1]
            answers.append(answer)
            if is_correct(q, answer):
                console.print("[green]Correct![/green]\n")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{q.answer}[/green]\n")
        score = session.finish_quiz(answers, questions)
        console.print(f"[bold]Score: {score.correct}/{score.total} ({score.percent:.0f}%)[/bold]")
        console.print("[green]Topic marked complete. Next review scheduled.[/green]\n")
        if not Confirm.ask("Generate more questions?", default=False):
            break
        with console.status("Generating more questions..."):
            questions = session.generate_quiz(more=True)


def show_findings(findings: list) -> None:
    if not findings:
        console.print("[green]No issues found. Your solution looks secure![/green]")
        return
    table = Table(title="Security Scan Results")
    table.add_column("Severity")
    table.add_column("Issue", style="bold")
    table.add_column("Recommendation")
    for f in findings:
        color = SEVERITY_COLORS.get(f.severity, "white")
        table.add_row(f"[{color}]{f.severity}[/{color}]", f"{f.title}\n[dim]{f.description}[/dim]", f.recommendation)
    console.print(table)


def review_suggestions(path: Path, suggestions: list) -> None:
    if not suggestions:
        console.print("[green]Code quality looks excellent. No suggestions.[/green]")
        return
    for s in suggestions:
        console.print(Panel(
            f"{s.suggestion}\n[dim]{s.explanation}[/dim]\n\n[green]{s.suggested_code}[/green]",
            title=f"Line {s.line_number}", border_style="cyan",
        ))
        if Confirm.ask("Apply this suggestion?", default=False):
            path.write_text(apply_suggestion(path.read_text(encoding="utf-8"), s), encoding="utf-8")


def playground_path(playground_dir: str, file_name: str) -> Path:
    """Where the exercise file is written; only the base name of `file_name` is used."""
    name = Path(file_name).name
    if name in ("", ".", ".."):
        name = DEFAULT_PLAYGROUND_FILE
    return Path(playground_dir) / name


def run_playground(session: StudySession, playground_dir: str) -> None:
    with console.status("Building a playground scenario..."):
        scenario = session.start_playground()
    path = playground_path(playground_dir, scenario.file_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(scenario.initial_content, encoding="utf-8")
    console.print(Panel(Markdown(scenario.scenario), title="Playground", border_style="magenta"))
    console.print(f"Fix the file at [bold]{path}[/bold] in your editor, then scan it. [dim]q leaves the playground.[/dim]")

    try:
        while True:
            action = session_prompt("\nAction", choices=["scan", "quality", "show", "q"], default="scan")
            content = path.read_text(encoding="utf-8")
            if action == "show":
                console.print(Panel(content, title=scenario.file_name))
            elif action == "quality":
                with console.status("Analyzing code quality..."):
                    suggestions = session.analyze_code(content)
                review_suggestions(path, suggestions)
            elif action == "scan":
                with console.status("Running security scan..."):
                    findings = session.submit_playground(content)
                show_findings(findings)
                console.print("[green]Topic marked complete. Next review scheduled.[/green]")
    except SessionExitRequested:
        return


def cmd_topics(session: StudySession):
    search = Prompt.ask("Search (Enter for all)", default="")
    groups = catalog.filter_topics(search)
    if not groups:
        console.print(f"[yellow]No topics match '{search}'.[/yellow]")
        return
    descriptions = session.topic_descriptions() if Confirm.ask("Show descriptions?", default=False) else {}
    store = session.store
    due = store.due_topics()
    for tier, topics in groups.items():
        table = Table(title=catalog.TIER_LABELS[tier])
        table.add_column("Topic", style="cyan")
        table.add_column("Status")
        if descriptions:
            table.add_column("About", style="dim")
        for topic in topics:
            row = [topic, topic_badges(store, topic, due)]
            if descriptions:
                row.append(descriptions.get(topic, ""))
            table.add_row(*row)
        console.print(table)


def cmd_learn(session: StudySession, settings: Settings, topic: str | None = None):
    try:
        topic = topic or pick_topic(session.store)
        with console.status("Generating learning module..."):
            content = session.start_topic(topic)
        tier = catalog.tier_of(topic)
        console.print(Panel(
            f"[bold]{topic}[/bold]\n[dim]{catalog.TIER_LABELS[tier]} tier[/dim]", border_style="blue",
        ))
        show_annotated(content["explanation"], session.glossary)
        if content["diagram"]:
            show_diagram(content["diagram"])
        console.print(Panel(Markdown(content["summary"]), title="Key Takeaways", border_style="green"))

        while True:
            star = "unbookmark" if session.store.is_bookmarked(topic) else "bookmark"
            console.print(f"\n[dim]ask · quiz · playground · {star} · done · q[/dim]")
            action = session_prompt("Next", default="quiz").strip().lower()
            if action == "ask":
                question = session_prompt("Your question")
                with console.status("Thinking..."):
                    answer = session.ask(question)
                show_annotated(answer, session.glossary)
            elif action == "quiz":
                run_quiz_session(session)
            elif action == "playground":
                run_playground(session, settings.playground_dir)
            elif action in ("bookmark", "unbookmark"):
                bookmarked = session.store.toggle_bookmark(topic)
                console.print("[magenta]Bookmarked.[/magenta]" if bookmarked else "[dim]Bookmark removed.[/dim]")
            elif action == "done":
                session.mark_complete()
                console.print("[green]Topic marked complete. Next review scheduled.[/green]")
            else:
                console.print("[red]Unknown action.[/red]")
    except SessionExitRequested:
        console.print("[dim]Back to menu.[/dim]")


def cmd_review(session: StudySession, settings: Settings):
    store = session.store
    store.refresh_due()
    queue = get_review_queue(store)
    if not queue:
        console.print("[green]Nothing scheduled for review. Complete a topic to start its review cycle.[/green]")
    else:
        table = Table(title="Review Schedule")
        table.add_column("Topic", style="cyan")
        table.add_column("Rung", justify="right")
        table.add_column("Next Review")
        for row in queue:
            if row["due"]:
                when = "[yellow]due now[/yellow]"
            elif row["in_days"] == 1:
                when = "tomorrow"
            else:
                when = f"in {row['in_days']} days"
            table.add_row(row["topic"], row["rung"], when)
        console.print(table)
    mastered = get_mastered_topics(store)
    if mastered:
        console.print(f"\n[green]Mastered ({len(mastered)}):[/green] " + ", ".join(mastered))

    due = get_due_topics(store)
    if due and Confirm.ask(f"\nReview {len(due)} due topic(s) now?", default=True):
        try:
            topic = pick_topic(store, due)
        except SessionExitRequested:
            return
        cmd_learn(session, settings, topic)


def cmd_bookmarks(session: StudySession, settings: Settings):
    store = session.store
    bookmarked = [t for t in catalog.ALL_TOPICS if store.is_bookmarked(t)]
    if not bookmarked:
        console.print("[yellow]No bookmarks yet. Use 'bookmark' while studying a topic.[/yellow]")
        return
    try:
        topic = pick_topic(store, bookmarked)
        action = session_prompt("Action", choices=["learn", "remove"], default="learn")
    except SessionExitRequested:
        return
    if action == "remove":
        store.toggle_bookmark(topic)
        console.print("[dim]Bookmark removed.[/dim]")
    else:
        cmd_learn(session, settings, topic)


def cmd_glossary(session: StudySession):
    with console.status("Loading glossary..."):
        glossary = session.load_glossary()
    search = Prompt.ask("Search glossary (Enter for all)", default="").strip().lower()
    table = Table(title="DevSecOps Glossary")
    table.add_column("Term", style="bold cyan")
    table.add_column("Definition")
    for term, definition in sorted(glossary.items(), key=lambda kv: kv[0].lower()):
        if search in term.lower() or search in definition.lower():
            table.add_row(term, definition)
    if table.row_count:
        console.print(table)
    else:
        console.print(f"[yellow]No terms match '{search}'.[/yellow]")


def cmd_vulns(session: StudySession):
    with console.status("Fetching latest threat intelligence..."):
        feed = session.vulnerability_feed()

    table = Table(title="Latest CVEs")
    table.add_column("CVE", style="bold")
    table.add_column("Severity")
    table.add_column("Description")
    for cve in feed.cves:
        color = SEVERITY_COLORS.get(cve.severity, "white")
        table.add_row(cve.cve_id, f"[{color}]{cve.severity} ({cve.cvss_score:.1f})[/{color}]", cve.description)
    console.print(table)

    table = Table(title="OWASP Top 10")
    table.add_column("ID", style="cyan")
    table.add_column("Risk", style="bold")
    table.add_column("Summary")
    for risk in feed.owasp:
        table.add_row(risk.owasp_id, risk.name, risk.summary)
    console.print(table)


def cmd_news(session: StudySession):
    with console.status("Gathering DevSecOps news..."):
        brief = session.news()
    console.print(Panel(Markdown(render_markers(brief.summary)), title="DevSecOps News", border_style="blue"))
    if brief.sources:
        console.print("\n[bold]Sources:[/bold]")
        for source in brief.sources:
            console.print(f"  • {source.title} [dim]{source.uri}[/dim]")


def show_pace(store: ProgressStore):
    pace = store.pace()
    color = get_pace_color(pace.status)
    console.print(
        f"  Pace: [bold]{catalog.LEARNING_RATES.get(store.learning_rate, f'{store.learning_rate} topics/week')}[/bold]"
        f"  |  Estimated completion: [{color}]{format_estimate(pace)}[/{color}]"
    )


def cmd_pace(session: StudySession):
    store = session.store
    show_pace(store)
    for rate, label in catalog.LEARNING_RATES.items():
        marker = " ←" if rate == store.learning_rate else ""
        console.print(f"  [cyan]{rate:>2}[/cyan]) {label}{marker}")
    rate = IntPrompt.ask(
        "Topics per week", choices=[str(r) for r in catalog.LEARNING_RATES], default=store.learning_rate,
    )
    store.set_learning_rate(rate)
    show_pace(store)


def cmd_dashboard(session: StudySession):
    store = session.store
    stats = get_study_stats(store)
    ratio = store.completion_ratio()
    label = get_progress_label(ratio)
    color = get_progress_color(ratio)
    console.print(Panel(
        f"[bold]{stats['completed']} of {stats['total']} topics complete[/bold]",
        title="DevSecOps Progress Dashboard", border_style="blue",
    ))

    # Overall bar
    bar_filled = int(ratio * 20)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Progress: [bold]{stats['percent']}%[/bold] {bar} [{color}]{label}[/{color}]\n")

    table = Table(title="Tier Breakdown")
    table.add_column("Tier", style="cyan")
    table.add_column("Completed", justify="right")
    table.add_column("Bookmarked", justify="right")
    for tier in get_tier_progress(store):
        tier_color = get_progress_color(tier["completed"] / tier["total"])
        table.add_row(
            tier["name"],
            f"[{tier_color}]{tier['completed']}/{tier['total']}[/{tier_color}]",
            str(tier["bookmarked"]),
        )
    console.print(table)

    console.print(f"\n  Scheduled reviews: [bold]{stats['scheduled']}[/bold]  |  "
                  f"Due now: [bold]{stats['due']}[/bold]  |  "
                  f"Bookmarks: [bold]{stats['bookmarked']}[/bold]")
    show_pace(store)


def cmd_certify(session: StudySession):
    console.print(Panel(
        "You will get a complex, real-world scenario that draws on the whole curriculum.\n"
        f"Pass with a score of {session.pass_score} or more to earn your Certificate of Mastery.",
        title="Certification", border_style="yellow",
    ))
    if not Confirm.ask("Generate your challenge?", default=True):
        return
    with console.status("Generating your final challenge..."):
        challenge = session.generate_challenge()
    console.print(Panel(Markdown(challenge), title="Challenge", border_style="yellow"))
    file_path = Prompt.ask("Path to your written solution (Markdown or text)")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    with console.status("Evaluating your solution..."):
        result = session.evaluate_certification(Path(file_path).read_text(encoding="utf-8"))
    color = "green" if session.passed(result) else "red"
    verdict = "PASSED" if session.passed(result) else "NOT YET"
    console.print(f"\n  Score: [bold {color}]{result.score}/100 {verdict}[/bold {color}]\n")
    console.print(Markdown(result.feedback_summary))
    for title, items, style in (
        ("Strengths", result.strengths, "green"),
        ("Areas for improvement", result.areas_for_improvement, "yellow"),
    ):
        if items:
            console.print(f"\n[bold {style}]{title}:[/bold {style}]")
            for item in items:
                console.print(f"  • {item}")


def cmd_reset(session: StudySession):
    if Confirm.ask("[red]Forget all completed topics and review schedules?[/red]", default=False):
        session.store.reset_progress()
        console.print("[green]Progress reset. Bookmarks and pace were kept.[/green]")


def main():
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    store = ProgressStore(settings.db_path, default_learning_rate=settings.default_learning_rate)
    store.load()
    generator = ContentGenerator(api_key=settings.gemini_api_key, model_name=settings.text_model)
    session = StudySession(
        store, generator, glossary_file=settings.glossary_file, pass_score=settings.certification_pass_score,
    )

    show_welcome()
    if not settings.has_ai_configured():
        console.print("[yellow]No Gemini API key set (DEVSECOPS_TUTOR_GEMINI_API_KEY). "
                      "Progress views work; generating content will not.[/yellow]")
    due = store.due_topics()
    if due:
        console.print(f"[yellow]{len(due)} topic(s) due for review. Type 'review'.[/yellow]")

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="learn").strip().lower()
        try:
            if choice == "topics":
                cmd_topics(session)
            elif choice == "learn":
                cmd_learn(session, settings)
            elif choice == "review":
                cmd_review(session, settings)
            elif choice == "bookmarks":
                cmd_bookmarks(session, settings)
            elif choice == "glossary":
                cmd_glossary(session)
            elif choice == "vulns":
                cmd_vulns(session)
            elif choice == "news":
                cmd_news(session)
            elif choice == "pace":
                cmd_pace(session)
            elif choice == "dashboard":
                cmd_dashboard(session)
            elif choice == "certify":
                cmd_certify(session)
            elif choice == "reset":
                cmd_reset(session)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Keep shipping secure code![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except GenerationError as e:
            console.print(f"[red]{e} Please try again.[/red]")
        except Exception as e:
            logger.opt(exception=e).debug("Command failed")
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
