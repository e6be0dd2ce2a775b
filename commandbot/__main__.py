"""
Allow the commandbot package to be executed as a module.

This enables running the bot with:
    python -m commandbot
    python -m commandbot --serve
"""

import asyncio

from commandbot.main import main

if __name__ == "__main__":
    asyncio.run(main())
