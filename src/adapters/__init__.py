"""Integration adapters: Prusa Connect, SQLite, Telegram, and the admin API."""
