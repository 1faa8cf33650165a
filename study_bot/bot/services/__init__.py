"""Discord-agnostic business logic for the study bot."""
