"""Command-processing core of the helpdesk comment workflow."""
