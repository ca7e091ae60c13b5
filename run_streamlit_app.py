#!/usr/bin/env python
"""
Wrapper script to run the Streamlit face gallery console.
Requires the facegallery package to be installed (pip install -e .).
"""
import sys
from importlib.util import find_spec

import streamlit.web.cli as stcli

if __name__ == "__main__":
    # Locate the installed console module without importing it
    app_path = find_spec("facegallery.ui.console_app").origin

    sys.argv = ["streamlit", "run", app_path]
    sys.exit(stcli.main())
