"""
Terminal event source for Forget It.

Modules:
- keys: Key values and curses key translation
- handler: Keyboard reader and ticker threads feeding one queue
"""
