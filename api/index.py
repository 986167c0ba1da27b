import sys
from pathlib import Path

# Serverless entry point; app modules import each other by bare name
web_server_dir = Path(__file__).parent.parent / "web_server"
if str(web_server_dir.absolute()) not in sys.path:
    sys.path.insert(0, str(web_server_dir.absolute()))

from app import app  # noqa: E402,F401
