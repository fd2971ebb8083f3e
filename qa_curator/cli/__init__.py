"""Command-line interface for qa-curator."""
