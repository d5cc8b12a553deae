"""Command-line harnesses built on the codec facade."""
