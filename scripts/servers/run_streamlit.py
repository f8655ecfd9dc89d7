"""Start the catalog UI with Streamlit using configuration from .env."""

import subprocess
import sys
from pathlib import Path

from src.utils.config import settings

UI_APP = Path(__file__).resolve().parents[2] / "ui" / "app.py"

if __name__ == "__main__":
    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(UI_APP),
        "--server.port",
        str(settings.streamlit_port),
        "--server.address",
        settings.streamlit_host,
        "--logger.level",
        settings.log_level.lower(),
    ]
    sys.exit(subprocess.run(cmd).returncode)
