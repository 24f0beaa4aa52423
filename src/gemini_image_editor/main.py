"""Console entry point: serve the editor page with Streamlit."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from streamlit.web import cli as streamlit_cli

APP_PATH: Path = Path(__file__).resolve().with_name("app.py")


def build_streamlit_argv(extra_args: Optional[List[str]] = None) -> List[str]:
    """Return the argv ``streamlit run`` expects for the editor page."""

    return ["streamlit", "run", str(APP_PATH), *(extra_args or [])]


def main() -> None:
    """Launch the Gemini image editor in the browser."""

    print("✨ Starting the Gemini image editor...")
    sys.argv = build_streamlit_argv(sys.argv[1:])
    sys.exit(streamlit_cli.main())


if __name__ == "__main__":
    main()
