"""evalcourt command-line interface."""
