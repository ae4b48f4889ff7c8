"""Shared test configuration.

Loads ``.env`` then ``.env.test`` so integration tests pick up the MongoDB
settings; unit tests never need either file.
"""

from pathlib import Path

from dotenv import load_dotenv

# Load .env first (default environment variables)
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# .env.test overrides .env values
env_test_path = Path(__file__).parent.parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)
