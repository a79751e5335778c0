"""
Commands Package.

This package contains the command classes produced by timeline gestures.
Commands encapsulate changes to a script (moving events, creating
connections, reordering storylines) and support undo.
"""
