"""Main execution script for the Auralis teacher assistant."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv() # Load variables from .env into the environment before config is read

import config
from utils.logger import setup_logger
from utils.error_handler import (CompletionError, ConfigError, ExtractionError, PersistenceError,
                                 RemoteSaveError, UserCancelledError)
from core.assistant import Assistant, CompletionResult
from core.exporter import EXPORT_FORMATS
from core.prompts import TASKS, TaskKind, TaskSpec
from services.completion_client import CompletionClient
from services.file_loader import extract_text
from services.history_store import HistoryEntry, HistoryStore
from services.local_storage import FileStorage
from services.remote_store import RemoteStore
from services.usage_tracker import UsageTracker
import ui.cli as cli

# Initialize logger as early as possible after config is loaded
logger = setup_logger()

MENU_HISTORY = "History"
MENU_USAGE = "Usage"

def build_assistant() -> Assistant:
    """Wires the assistant from configuration.

    Raises:
        ConfigError: If the completion API key is missing.
    """
    storage = FileStorage(config.DATA_DIR)
    remote = RemoteStore() if config.FIRESTORE_PROJECT else None
    return Assistant(
        client=CompletionClient(),
        history=HistoryStore(storage),
        usage=UsageTracker(storage),
        remote=remote,
    )

def read_primary_input(task: TaskSpec) -> str:
    """Asks for the main content, either typed in or loaded from a file."""
    source = cli.ask("Type [bold]t[/bold] to enter text or [bold]f[/bold] to load a file", default="t").strip().lower()
    if source == "f":
        path = cli.ask("Path to file").strip()
        text = extract_text(os.path.expanduser(path))
        cli.display_success(f"File loaded ({len(text)} characters).")
        return text
    return cli.read_multiline("Content", task.input_label)

def run_task(assistant: Assistant, task: TaskSpec):
    """Collects input for one task, generates a result and offers follow-up actions."""
    cli.display_step(task.kind.label, task.description)
    fields = cli.prompt_fields(task)

    try:
        text = read_primary_input(task)
    except ExtractionError as e:
        logger.warning(f"Upload rejected: {e}")
        cli.display_error(str(e))
        return

    if not text.strip():
        cli.display_error("Please enter some text or upload a file.")
        return

    try:
        result = cli.run_with_progress("Generating...", assistant.generate, task.kind, text, fields)
    except CompletionError as e:
        logger.error(f"Generation failed for '{task.kind.label}': {e}", exc_info=config.DEBUG)
        cli.display_error("Failed to generate response. Please try again.")
        return

    cli.display_success("Response generated successfully!")
    result_actions(assistant, result, text)

def result_actions(assistant: Assistant, result: CompletionResult, input_text: str):
    """Loop of follow-up actions on a generated result until the user goes back."""
    is_rubric = result.task_kind is TaskKind.RUBRIC
    actions = ["View formatted", "View plain text", "Save to history"]
    actions += [f"Export {fmt.upper()}" for fmt in EXPORT_FORMATS]
    if is_rubric:
        actions += ["Show rubric table", "Export rubric HTML"]
    if assistant.remote and assistant.remote.enabled:
        actions.append("Save to cloud")

    cli.display_response(result.feature, result.text, rubric=is_rubric)
    while True:
        try:
            action = cli.prompt_for_selection(actions, str, "What next?")
        except UserCancelledError:
            return
        try:
            if action == "View formatted":
                cli.display_response(result.feature, result.text, rubric=is_rubric)
            elif action == "View plain text":
                cli.display_response(result.feature, result.text, formatted=False)
            elif action == "Save to history":
                assistant.save_to_history(result, input_text)
                cli.display_success("Saved to history!")
            elif action.startswith("Export ") and action != "Export rubric HTML":
                fmt = action.split()[-1].lower()
                path = assistant.export(result.text, result.feature, fmt)
                cli.display_success(f"Exported to {path}")
            elif action == "Show rubric table":
                cli.display_rubric_table(assistant.rubric_rows(result))
            elif action == "Export rubric HTML":
                path = assistant.export_rubric(result)
                cli.display_success(f"Professional rubric downloaded to {path}")
            elif action == "Save to cloud":
                doc_id = assistant.save_remote(result, input_text)
                cli.display_success(f"Saved to cloud ({doc_id}).")
        except RemoteSaveError as e:
            logger.warning(f"Remote save failed: {e}")
            cli.display_warning(f"Could not save to cloud: {e}")
        except (PersistenceError, OSError) as e:
            logger.error(f"Action '{action}' failed: {e}", exc_info=config.DEBUG)
            cli.display_error(f"{action} failed: {e}")

def format_history_entry(entry: HistoryEntry) -> str:
    return f"{entry.feature} | {entry.timestamp.strftime('%Y-%m-%d %H:%M')} | {entry.input}"

def history_screen(assistant: Assistant):
    """Browse, search, rename, export and delete saved results."""
    history = assistant.history
    cli.display_step(MENU_HISTORY, "View and manage your AI-generated content")
    term = cli.ask("Search history (blank for all)")
    feature: Optional[str] = None
    features = history.features()
    if features and cli.confirm_action("Filter by feature?", default=False):
        try:
            feature = cli.prompt_for_selection(features, str, "Choose a feature:")
        except UserCancelledError:
            feature = None

    entries = history.search(term, feature)
    if not entries:
        cli.display_warning("No history items found" if not history.list() else "No items match your search")
    else:
        cli.display_history(entries)

    actions = ["View item", "Rename item", "Export item as PDF", "Delete item", "Clear all history"]
    while True:
        try:
            action = cli.prompt_for_selection(actions, str, "History actions:")
        except UserCancelledError:
            return
        try:
            if action == "Clear all history":
                if cli.confirm_action("Delete every saved item?", default=False):
                    history.clear_all()
                    cli.display_success("History cleared")
                    entries = []
                continue

            entry = cli.prompt_for_selection(entries, format_history_entry, "Choose an item:")
            if action == "View item":
                cli.display_history_entry(entry)
            elif action == "Rename item":
                label = cli.ask("New title", default=entry.feature)
                if history.rename_feature(entry.id, label):
                    cli.display_success("Response renamed successfully!")
                entries = history.search(term, feature)
            elif action == "Export item as PDF":
                path = assistant.export(entry.content, entry.feature, "pdf")
                cli.display_success(f"Exported to {path}")
            elif action == "Delete item":
                if history.delete_by_id(entry.id):
                    cli.display_success("Item deleted from history")
                entries = history.search(term, feature)
        except UserCancelledError:
            continue
        except (PersistenceError, OSError) as e:
            logger.error(f"History action '{action}' failed: {e}", exc_info=config.DEBUG)
            cli.display_error(f"{action} failed: {e}")

def usage_screen(assistant: Assistant):
    cli.display_step(MENU_USAGE, "Your usage statistics")
    cli.display_usage(assistant.usage.load(), assistant.history.stats())

def main():
    """Main function running the interactive assistant session."""
    logger.info(f"Starting {config.PRODUCT_NAME} session.")
    cli.display_welcome()

    try:
        assistant = build_assistant()
    except ConfigError as e:
        logger.critical(f"Setup Error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Setup Error: {e}")
        cli.display_farewell()
        return

    menu = [spec.kind.label for spec in TASKS.values()] + [MENU_HISTORY, MENU_USAGE]
    try:
        while True:
            try:
                choice = cli.prompt_for_selection(menu, str, "What would you like to do? (0 to quit)")
            except UserCancelledError:
                break
            try:
                if choice == MENU_HISTORY:
                    history_screen(assistant)
                elif choice == MENU_USAGE:
                    usage_screen(assistant)
                else:
                    run_task(assistant, TASKS[TaskKind(choice)])
            except (ValueError, RuntimeError) as e:
                cli.display_error(str(e))
    except KeyboardInterrupt:
        logger.info("Session interrupted by user (Ctrl+C).")
        cli.display_warning("Session interrupted.")
    except Exception as e:
        # Catch-all for unexpected errors
        logger.critical(f"An unexpected error occurred: {e}", exc_info=True)
        cli.display_error(f"An unexpected error occurred: {e}. Check logs for details.")
    finally:
        cli.display_farewell()

if __name__ == "__main__":
    main()
