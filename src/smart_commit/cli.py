"""
Command line interface for the smart_commit tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``smartcommit`` command. It orchestrates
repository detection, configuration loading, change detection, diff
extraction, the grouping request to the LLM and the commit loop.

The process exits with ``0`` on success and on the expected early exits
(no changes, files already staged, request declined) and with ``1`` on
any failure.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import click

from smart_commit import __version__
from smart_commit.config.loader import ConfigError, load_config, load_rules
from smart_commit.diff.diff_extractor import extract_diffs
from smart_commit.grouping.commit_engine import CommitApplyError, GroupCommitEngine, GroupOutcome, GroupState
from smart_commit.grouping.group_model import CommitGroup, RunConfig
from smart_commit.llm.commit_planner import CommitPlanner, PlanParseError
from smart_commit.llm.ollama_client import LLMError, OllamaClient
from smart_commit.vcs.git_client import GitClient, GitError
from smart_commit.workflow import (
    RunOutcome,
    check_preconditions,
    check_records,
    find_staged_files,
    find_unstaged_changes,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

DEFAULT_TOKEN_BUDGET = 100_000


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_summary_box(title: str, items: List[str]):
    """Print a formatted summary box."""
    max_width = max(len(title), max(len(item) for item in items) if items else 0)
    box_width = min(max_width + 4, 60)

    click.echo(f"\n┌{'─' * box_width}┐")
    click.echo(f"│ {title.ljust(box_width - 2)}│")
    click.echo(f"├{'─' * box_width}┤")
    for item in items:
        click.echo(f"│ {item.ljust(box_width - 2)}│")
    click.echo(f"└{'─' * box_width}┘")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


# ---------------------------------------------------------------------------
# Interaction
# ---------------------------------------------------------------------------

def display_commit_group(group: CommitGroup, group_num: int, total_groups: int) -> None:
    """Show a proposed commit group."""
    click.echo(f"\n{'─'*60}")
    click.echo(click.style(f"📦 Commit Group {group_num}/{total_groups}", fg="magenta", bold=True))
    click.echo(f"{'─'*60}")

    click.echo(f"\n💬 Message: {click.style(group.commit_message, fg='green')}")
    click.echo(f"\n📄 Files ({len(group.files)}):")
    for file in group.files:
        click.echo(f"   • {click.style(file, fg='cyan')}")
    click.echo("")


def confirm_group(question: str) -> bool:
    """Ask a yes/no question until the user answers y/yes/n/no."""
    return click.confirm(f"   {question}", default=None)


def report_early_exit(outcome: RunOutcome, staged_files: Optional[List[str]] = None) -> None:
    """Explain an expected early exit to the user."""
    if outcome is RunOutcome.ALREADY_STAGED:
        print_error("There are already staged files. Please commit or unstage them first:")
        for path in staged_files or []:
            click.echo(f"   - {path}", err=True)
        click.echo("\n   To unstage files, run: git reset", err=True)
        click.echo("   To commit staged files, run: git commit", err=True)
    elif outcome is RunOutcome.NO_CHANGES:
        print_warning("No changes detected to commit.")
    elif outcome is RunOutcome.ABORTED:
        print_warning("Aborted; nothing was staged or committed.")


def confirm_token_budget(estimated: int, budget: int, auto_approve: bool) -> bool:
    """Warn when a request exceeds the token budget.

    Returns False only when the user declines to send the request.
    """
    if estimated <= budget:
        return True
    print_warning(f"The request is about {estimated} tokens, above the budget of {budget}.")
    if auto_approve:
        print_info("Auto-approve enabled - sending anyway", indent=1)
        return True
    return click.confirm("   Send the request anyway?", default=None)


def summarize(outcomes: List[GroupOutcome], dry_run: bool) -> List[str]:
    applied = [o for o in outcomes if o.state is GroupState.APPLIED]
    skipped = [o for o in outcomes if o.state is GroupState.SKIPPED]
    failed = [o for o in outcomes if o.state is GroupState.FAILED]

    verb = "Would commit" if dry_run else "Committed"
    items = [
        f"✓ {verb}: {_plural(len(applied), 'group')}",
        f"✓ Files: {sum(len(o.group.files) for o in applied)}",
    ]
    if skipped:
        items.append(f"⚠ Skipped: {_plural(len(skipped), 'group')}")
    if failed:
        items.append(f"✗ Failed: {', '.join(str(o.index) for o in failed)}")
    return items


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

@click.command()
@click.option("--yes", "--yolo", "-y", "yes", is_flag=True,
              help="Commit every proposed group without prompting and continue past failures.")
@click.option("--dry-run", is_flag=True, help="Show what would be staged and committed without doing it.")
@click.option("--rules", "rules_path", type=click.Path(path_type=Path, dir_okay=False),
              help="Path to a rules file with grouping guidance (default: .smartcommit-rules).")
@click.option("--context", "extra_context", default="", help="Additional free-form context for the model.")
@click.option("--token-budget", type=click.IntRange(min=1), default=DEFAULT_TOKEN_BUDGET, show_default=True,
              help="Warn before sending a request estimated above this many tokens.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="smartcommit")
def main(
    yes: bool,
    dry_run: bool,
    rules_path: Optional[Path],
    extra_context: str,
    token_budget: int,
    verbose: bool,
) -> None:
    """🤖 Group uncommitted changes into commits with AI-generated messages.

    Analyzes the working directory, asks the language model to group the
    changes, and stages and commits each group after confirmation.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    run_config = RunConfig(auto_approve=yes, dry_run=dry_run, verbose=verbose)

    click.echo("\n" + "="*60)
    click.echo("🤖 smartcommit - AI Commit Grouping".center(60))
    click.echo("="*60)

    total_steps = 6
    try:
        # Step 1: Detect repository
        print_step(1, total_steps, "Detecting Repository")
        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("No Git repository found in current directory or parent directories.")
            raise click.exceptions.Exit(EXIT_FAILURE)
        client = GitClient(repo_root)
        print_success(f"Found Git repository at: {repo_root}")

        # Step 2: Load configuration
        print_step(2, total_steps, "Loading Configuration")
        config = load_config()
        rules = load_rules(repo_root, rules_path)
        print_success("Configuration loaded successfully")
        print_info(f"LLM Server: {config['base_url']}:{config['port']}", indent=1)
        print_info(f"Model: {config['model']}", indent=1)
        if rules:
            print_info("Using custom grouping rules", indent=1)
        if run_config.dry_run:
            print_info("Dry-run mode: nothing will be staged or committed", indent=1)

        # Step 3: Analyze repository status
        print_step(3, total_steps, "Analyzing Changes")
        with ProgressIndicator("Reading repository status"):
            snapshot = client.status_snapshot()

        outcome = check_preconditions(snapshot)
        if outcome is not None:
            report_early_exit(outcome, find_staged_files(snapshot))
            raise click.exceptions.Exit(EXIT_SUCCESS)

        author = client.author_identity()
        changes = find_unstaged_changes(snapshot)
        print_success(f"Found {_plural(len(changes), 'changed file')}")
        for path, _flags in changes[:5]:
            print_info(path, indent=1)
        if len(changes) > 5:
            print_info(f"... and {len(changes) - 5} more", indent=1)

        # Step 4: Extract diffs
        print_step(4, total_steps, "Extracting Diffs")
        with ProgressIndicator(f"Reading diffs for {len(changes)} file(s)"):
            records = extract_diffs(client, changes)

        outcome = check_records(records)
        if outcome is not None:
            report_early_exit(outcome)
            raise click.exceptions.Exit(EXIT_SUCCESS)

        print_success(f"Extracted diffs for {len(records)} file(s)")
        if len(records) < len(changes):
            print_warning(f"{len(changes) - len(records)} file(s) could not be read and were skipped", indent=1)
        for record in records:
            detail = "binary" if record.is_binary else _plural(len(record.line_changes), "changed line")
            print_info(f"{record.status.value:<9} {record.filename} ({detail})", indent=1)

        # Step 5: Generate commit groups using LLM
        print_step(5, total_steps, "Generating Commit Groups")
        ollama_client = OllamaClient(
            base_url=config["base_url"],
            port=config["port"],
            model=config["model"],
            request_timeout=float(config.get("request_timeout", 60)),
            max_tokens=config.get("max_tokens"),
        )
        planner = CommitPlanner(ollama_client)

        estimated = planner.estimate_request_tokens(records, extra_context, rules)
        print_info(f"Estimated request size: ~{estimated} tokens", indent=1)
        if not confirm_token_budget(estimated, token_budget, run_config.auto_approve):
            report_early_exit(RunOutcome.ABORTED)
            raise click.exceptions.Exit(EXIT_SUCCESS)

        with ProgressIndicator("Analyzing changes and generating messages (this may take a moment)"):
            groups = planner.plan(records, extra_context, rules)

        if not groups:
            print_error("No commit groups were generated.")
            raise click.exceptions.Exit(EXIT_FAILURE)
        print_success(f"Generated {_plural(len(groups), 'commit group')}")

        # Step 6: Review and commit
        print_step(6, total_steps, "Review and Commit")
        engine = GroupCommitEngine(
            client,
            author,
            confirm=confirm_group,
            display=display_commit_group,
        )
        outcomes = engine.apply(groups, run_config)

        print_summary_box("✨ Summary", summarize(outcomes, run_config.dry_run))
        failed = [o for o in outcomes if o.state is GroupState.FAILED]
        if failed:
            print_warning(f"{_plural(len(failed), 'group')} failed; the changes remain uncommitted.")
        click.echo("\n🎉 All done!\n")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
    except LLMError as exc:
        print_error(f"LLM error: {exc}")
        print_info("Make sure Ollama is running and accessible", indent=1)
        raise click.exceptions.Exit(EXIT_FAILURE)
    except PlanParseError as exc:
        print_error(f"Invalid commit plan from LLM: {exc}")
        print_info("Nothing was staged or committed", indent=1)
        raise click.exceptions.Exit(EXIT_FAILURE)
    except CommitApplyError as exc:
        print_error(str(exc))
        print_info("Remaining groups were not attempted", indent=1)
        raise click.exceptions.Exit(EXIT_FAILURE)
    except click.exceptions.Abort:
        raise
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_FAILURE)
