"""
Core state and storage for Forget It.

Modules:
- selection: Cursor lists and the tab bar view
- models: Todo and Note records, AppState session flags
- modes: Input modes with their entry buffers
- app: Input mode state machine
- persistence: Snapshot file I/O (note_db.json)
- config: Key bindings and colour theme (config.json)
- runner: Background execution of todo commands
- seed: Default notes for a first run
- logger: Rotating session log
- constants: File names and defaults
"""
