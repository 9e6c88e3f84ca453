"""Installation and SSH configuration logic independent of the CLI."""
