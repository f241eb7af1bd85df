"""Interactive prompts, validation and terminal styling."""
