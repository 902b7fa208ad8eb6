"""Domain layer (pure logic).

- Keep rotation, ranking and redemption rules here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI.
- Time and randomness are passed in as arguments; nothing here calls datetime.now().
"""
