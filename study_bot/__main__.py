"""Allow ``python -m study_bot``."""

from study_bot.bot.client import main

if __name__ == "__main__":
    main()
