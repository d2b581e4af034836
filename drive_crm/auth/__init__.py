"""Session resolution and role-based route guarding."""
