"""Built-in sub-commands for the fetchkit CLI."""
