"""Study group Discord bot: flash card deck reviews and a shared assignment calendar."""

__version__ = "0.1.0"
