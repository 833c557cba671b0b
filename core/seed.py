"""
Default content for a first run.

Written to the snapshot file only when none exists yet.
"""
from datetime import datetime
from typing import Optional

from core.models import Note, Todo, now
from core.selection import SelectionList

PROJECT_URL = "https://github.com/DevinR528/forget"


def default_collection(created: Optional[datetime] = None) -> SelectionList:
    """
    Create the welcome collection.

    Note One walks through the default key bindings, Note Two is a
    plain three-item list.

    Args:
        created: Timestamp for every seeded todo (default: now)

    Returns:
        SelectionList of Notes, first note selected
    """
    created = created or now()

    def todo(task: str, cmd: str = "") -> Todo:
        return Todo(task=task, cmd=cmd, completed=False, date=created)

    guide = Note(
        title="Note One",
        note="You can add to the Notes by hitting ctrl-k.",
        todos=SelectionList([
            todo("You can add a Sticky Note by hitting ctrl-h"),
            todo("You can add a Todo by hitting ctrl-n"),
            todo("You can edit the selected Todo by hitting ctrl-e"),
            todo("You can check off a Todo by hitting Backspace"),
            todo("You can delete a Todo by hitting Delete"),
            todo("You can delete a Sticky by hitting ctrl-u"),
            todo("You can save to the data base by hitting ctrl-s"),
            todo("Oh you can exit by ctrl-q or Esc"),
            todo("Todo's can run commands when selected with Enter.",
                 cmd=f"xdg-open {PROJECT_URL}"),
        ]),
    )

    plain = Note(
        title="Note Two",
        note="",
        todos=SelectionList([todo("First"), todo("Second"), todo("Third")]),
    )

    return SelectionList([guide, plain])
