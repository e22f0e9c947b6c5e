#!/usr/bin/env python3
"""
Weitblick - Main CLI Entry Point

Explore an idea through five philosophical perspectives in the terminal.
"""

import asyncio

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt, Confirm
from rich import box

from config import WEB_PORT
from models import ProviderId, PROVIDER_LABELS, NodeKind
from repositories import get_credential_store
from weitblick import DiscourseSession, start_compass, answer_phase, progress
from weitblick.classify import detect_language
from weitblick.compass import phase_info
from weitblick.errors import WeitblickError, InvalidCredential, CompassError

console = Console()

KEY_URLS = {
    ProviderId.GEMINI: "https://aistudio.google.com/app/apikey",
    ProviderId.OPENAI: "https://platform.openai.com/api-keys",
    ProviderId.ANTHROPIC: "https://console.anthropic.com/settings/keys",
    ProviderId.DEEPSEEK: "https://platform.deepseek.com/api_keys",
}


def show_status():
    """Show which providers have a stored key"""
    credentials = get_credential_store().load()
    masked = credentials.masked()

    table = Table(title="Providers", box=box.ROUNDED)
    table.add_column("Provider", style="cyan")
    table.add_column("Configured", justify="center")
    table.add_column("Key", style="dim")

    for provider in ProviderId:
        entry = masked[provider.value]
        table.add_row(
            PROVIDER_LABELS[provider],
            "[green]yes[/green]" if entry["configured"] else "[dim]no[/dim]",
            entry["key"] or "-",
        )

    console.print(table)
    if not credentials.configured():
        console.print("[yellow]No keys configured - analyses use static fallback text.[/yellow]")
    return credentials


def setup_wizard():
    """Interactive setup for provider keys"""
    console.print(Panel.fit(
        "[bold cyan]Weitblick Setup[/bold cyan]\n\n"
        "Weitblick asks every configured AI provider for each perspective.\n"
        "All keys are optional; without any, static text is used.\n",
        title="Welcome"
    ))

    store = get_credential_store()
    for provider in ProviderId:
        label = PROVIDER_LABELS[provider]
        if store.get(provider):
            if not Confirm.ask(f"{label} key is set. Replace it?", default=False):
                continue
        console.print(f"\nGet a {label} key at: [link]{KEY_URLS[provider]}[/link]")
        key = Prompt.ask(f"Enter {label} key (or press Enter to skip)", password=True, default="")
        if not key:
            continue
        try:
            store.set(provider, key)
            console.print(f"[green]{label} key saved.[/green]")
        except InvalidCredential as e:
            console.print(f"[red]{e}[/red]")

    console.print("[dim]Keys stay local - only sent to their respective APIs when making calls[/dim]")


def print_nodes(session: DiscourseSession, nodes=None):
    """Print nodes as a numbered table; returns the listed nodes"""
    nodes = nodes if nodes is not None else sorted(
        session.state.nodes.values(), key=lambda n: (n.level, n.created_at)
    )

    table = Table(box=box.ROUNDED, show_lines=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Level", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Content")
    table.add_column("Source", style="dim")

    selected_id = session.state.selected_id
    for i, node in enumerate(nodes, 1):
        marker = "*" if node.id == selected_id else ""
        table.add_row(
            f"{i}{marker}",
            str(node.level),
            node.title,
            node.content,
            node.provider or "fallback",
        )

    console.print(table)
    return nodes


def print_classification(session: DiscourseSession):
    c = session.state.classification
    console.print(Panel.fit(
        f"Language: [cyan]{c.language.value}[/cyan]   "
        f"Level: [cyan]{c.sophistication_level.value}[/cyan]   "
        f"Category: [cyan]{c.category.value}[/cyan]",
        title="Classification"
    ))


def run_session(idea: str, mode: str = "perspectives", strategy: str = None, interactive: bool = True):
    """Run a discourse session for one idea"""
    credentials = get_credential_store().load()
    session = DiscourseSession(credentials=credentials, strategy=strategy)

    with console.status("[dim]Analysing...[/dim]"):
        asyncio.run(session.start(idea, mode=mode))
    print_classification(session)
    listed = print_nodes(session)

    while interactive:
        console.print("\n[bold]Options:[/bold]  "
                      "[cyan]<n>[/cyan] think forward from node n  "
                      "[cyan]q[/cyan] quintessence  "
                      "[cyan]r[/cyan] reset  "
                      "[cyan]x[/cyan] quit")
        choice = Prompt.ask("Choice", default="x").strip().lower()

        try:
            if choice == "x":
                break
            elif choice == "q":
                with console.status("[dim]Synthesizing...[/dim]"):
                    asyncio.run(session.generate_quintessence())
                listed = print_nodes(session)
            elif choice == "r":
                session.reset()
                idea = Prompt.ask("New idea (or Enter to quit)", default="")
                if not idea:
                    break
                with console.status("[dim]Analysing...[/dim]"):
                    asyncio.run(session.start(idea, mode=mode))
                print_classification(session)
                listed = print_nodes(session)
            elif choice.isdigit() and 1 <= int(choice) <= len(listed):
                node = listed[int(choice) - 1]
                with console.status(f"[dim]Thinking forward from {node.title}...[/dim]"):
                    asyncio.run(session.think_forward(node.id))
                listed = print_nodes(session)
            else:
                console.print("[red]Unknown choice[/red]")
        except WeitblickError as e:
            console.print(f"[red]{e}[/red]")

    session.close()
    quintessences = [n for n in session.state.nodes.values() if n.kind == NodeKind.QUINTESSENCE]
    if quintessences:
        console.print(f"[dim]{len(quintessences)} quintessence(s) generated[/dim]")
    return session


def run_compass(idea: str):
    """Walk through the four compass phases"""
    language = detect_language(idea).value
    run = start_compass(idea, language)

    while not run.completed:
        info = phase_info(run.current_phase, language)
        console.print(Panel(
            f"[bold]{info['question']}[/bold]",
            title=f"{run.current_phase + 1}. {info['title']} - {info['description']}",
            subtitle=f"{progress(run):.0f}%",
        ))
        answer = Prompt.ask("Answer (or Enter to stop)", default="")
        if not answer:
            break
        try:
            analysis = answer_phase(run, answer)
        except CompassError as e:
            console.print(f"[red]{e}[/red]")
            continue
        for line in analysis.perspectives:
            console.print(f"  [cyan]-[/cyan] {line}")
        for line in analysis.opportunities:
            console.print(f"  [green]+[/green] {line}")
        for line in analysis.risks:
            console.print(f"  [red]![/red] {line}")

    console.print(f"[dim]Compass progress: {progress(run):.0f}%[/dim]")
    return run


def cli():
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Weitblick - think an idea through five perspectives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  weitblick --idea "Bewusstsein ist relational"
  weitblick --idea "..." --mode dialectic   # Thesis and antithesis
  weitblick --compass "..."                 # Guided four-phase questionnaire
  weitblick --setup                         # Store provider keys
  weitblick --status                        # Show configured providers
  weitblick --web                           # Run the web interface
        """
    )
    parser.add_argument("--idea", "-i", help="Idea to explore")
    parser.add_argument("--mode", choices=["perspectives", "dialectic"], default="perspectives")
    parser.add_argument("--strategy", choices=["per_perspective", "discourse"], help="How perspectives are requested")
    parser.add_argument("--compass", metavar="IDEA", help="Guided four-phase questionnaire")
    parser.add_argument("--once", action="store_true", help="Print the first level and exit")
    parser.add_argument("--setup", action="store_true", help="Run setup wizard")
    parser.add_argument("--status", action="store_true", help="Show configured providers")
    parser.add_argument("--web", action="store_true", help="Run web interface")

    args = parser.parse_args()

    if args.setup:
        setup_wizard()
    elif args.status:
        show_status()
    elif args.web:
        from app import app
        console.print(f"[dim]Starting web interface at http://localhost:{WEB_PORT}...[/dim]")
        app.run(port=WEB_PORT)
    elif args.compass:
        run_compass(args.compass)
    else:
        idea = args.idea or Prompt.ask("Your idea")
        try:
            run_session(idea, mode=args.mode, strategy=args.strategy, interactive=not args.once)
        except WeitblickError as e:
            console.print(f"[red]{e}[/red]")


if __name__ == "__main__":
    cli()
