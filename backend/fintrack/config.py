import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or the backend directory
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

DEFAULT_EXPENSE_GROUPS = (
    ("default", "Default"),
    ("family", "Family"),
    ("friends", "Friends"),
    ("work", "Work"),
    ("travel", "Travel"),
)


def parse_groups(raw):
    """Parse ``"id:Name,id:Name"`` into ``(id, name)`` pairs."""
    groups = []
    for item in (raw or "").split(","):
        item = item.strip()
        if not item:
            continue
        group_id, _, name = item.partition(":")
        groups.append((group_id.strip(), name.strip() or group_id.strip()))
    return tuple(groups)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/fintrack')

    CORS_ORIGINS = [
        o.strip() for o in
        os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080').split(',')
        if o.strip()
    ]

    # Group registry, injected into the app at start-up
    EXPENSE_GROUPS = parse_groups(os.getenv('EXPENSE_GROUPS')) or DEFAULT_EXPENSE_GROUPS

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
