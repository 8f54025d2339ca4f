"""Interactive numbered-menu shell

Menu:
    1. List Files
    2. Change Directory
    3. Create File
    4. Delete File
    5. Rename/Move File
    6. Copy File
    7. Search File
    8. Manage Permissions
    9. Exit

Every filesystem error is reported and control returns to the menu. End of
input (or Ctrl-C) on any prompt ends the session.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from rich.console import Console

from .errors import ErrnoException
from .explorer import Explorer

__all__ = ["MenuShell"]

logger = logging.getLogger(__name__)

MENU_ITEMS = (
    "List Files",
    "Change Directory",
    "Create File",
    "Delete File",
    "Rename/Move File",
    "Copy File",
    "Search File",
    "Manage Permissions",
    "Exit",
)
EXIT_CHOICE = len(MENU_ITEMS)


class MenuShell:
    """Numbered-menu front end for an Explorer"""

    def __init__(
        self,
        explorer: Explorer,
        console: Optional[Console] = None,
        input_func: Optional[Callable[[str], str]] = None,
    ):
        self.explorer = explorer
        self.console = console or Console()
        self._input = input_func or self.console.input
        self._actions: Dict[int, Callable[[], None]] = {
            1: self.list_files,
            2: self.change_directory,
            3: self.create_file,
            4: self.delete_file,
            5: self.rename_file,
            6: self.copy_file,
            7: self.search_file,
            8: self.manage_permissions,
        }

    def _say(self, text: str, style: Optional[str] = None) -> None:
        # Paths and '[DIR]' tags must not be read as rich markup
        self.console.print(text, style=style, markup=False, highlight=False)

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def show_menu(self) -> None:
        self._say("")
        self._say("=============================")
        self._say("      FILE EXPLORER MENU      ", style="bold")
        self._say("=============================")
        self._say(f"Current directory: {self.explorer.cwd}", style="dim")
        for number, label in enumerate(MENU_ITEMS, start=1):
            self._say(f"{number}. {label}")

    def run(self) -> None:
        """Run the menu loop until Exit or end of input"""
        while True:
            try:
                self.show_menu()
                raw = self._ask("Enter choice: ")
                try:
                    choice = int(raw)
                except ValueError:
                    self._say(f"Invalid input! Please enter a number (1-{EXIT_CHOICE}).", style="yellow")
                    continue
                if not self.handle_choice(choice):
                    break
            except (EOFError, KeyboardInterrupt):
                self._say("")
                break
        self._say("Exiting File Explorer...")

    def handle_choice(self, choice: int) -> bool:
        """Run one menu action; returns False when the session should end"""
        if choice == EXIT_CHOICE:
            return False
        action = self._actions.get(choice)
        if action is None:
            self._say(f"Invalid choice! Enter a number between 1-{EXIT_CHOICE}.", style="yellow")
            return True
        try:
            action()
        except ErrnoException as e:
            logger.debug("Menu action %d failed: %s", choice, e)
            self._say(f"Error: {e}", style="red")
        return True

    def list_files(self) -> None:
        cwd = self.explorer.cwd
        entries = self.explorer.list_files()
        self._say("")
        self._say(f"Contents of: {cwd}")
        self._say("-------------------------------------")
        for entry in entries:
            tag = "[DIR]  " if entry.is_directory else "[FILE] "
            self._say(tag + entry.name, style="bold blue" if entry.is_directory else None)

    def change_directory(self) -> None:
        path = self._ask("Enter directory path: ")
        new_cwd = self.explorer.change_directory(path)
        self._say(f"Changed into directory: {new_cwd}", style="green")

    def create_file(self) -> None:
        name = self._ask("Enter file name: ")
        self.explorer.create_file(name)
        self._say(f"File created: {name}", style="green")

    def delete_file(self) -> None:
        name = self._ask("Enter file name to delete: ")
        self.explorer.delete_file(name)
        self._say(f"File deleted: {name}", style="green")

    def rename_file(self) -> None:
        old = self._ask("Enter current file name: ")
        new = self._ask("Enter new file name/path: ")
        self.explorer.rename(old, new)
        self._say("File renamed/moved successfully!", style="green")

    def copy_file(self) -> None:
        src = self._ask("Enter source file: ")
        dest = self._ask("Enter destination file: ")
        self.explorer.copy_file(src, dest)
        self._say("File copied successfully!", style="green")

    def search_file(self) -> None:
        name = self._ask("Enter file name to search: ")
        found = 0
        for path in self.explorer.search(name):
            self._say(f"Found: {path}")
            found += 1
        if not found:
            self._say(f"No files named {name!r} under {self.explorer.cwd}", style="yellow")

    def manage_permissions(self) -> None:
        name = self._ask("Enter file name: ")
        current = self.explorer.get_permissions(name)
        self._say("")
        self._say(f"Current Permissions for {name}: {current.to_string()} ({current.to_octal()})")

        answer = self._ask("Do you want to change permissions? (y/n): ")
        if answer[:1].lower() != "y":
            return
        perms = self._ask("Enter new permissions in octal (e.g., 755): ")
        updated = self.explorer.set_permissions(name, perms)
        self._say(f"Permissions updated! Now {updated.to_string()}", style="green")
