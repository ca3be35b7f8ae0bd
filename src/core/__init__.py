"""Core domain package for printwatch.

Core contains snapshot diffing, throttling, and dispatch logic without any
Prusa Connect, Telegram, or storage-specific code, keeping the engine portable.
"""
