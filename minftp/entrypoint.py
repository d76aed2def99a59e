#!/usr/bin/env python3
"""
Launcher for the minftp Streamlit UI.

Sets up logging and replaces the current process with
``streamlit run minftp/ui/app.py``. Bind address and port come from
MINFTP_UI_HOST and MINFTP_UI_PORT.
"""

import os
import sys
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("minftp.entrypoint")

APP_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'ui', 'app.py')


def build_streamlit_command(host: str, port: int) -> list:
    return [
        'streamlit',
        'run',
        APP_PATH,
        f'--server.port={port}',
        f'--server.address={host}',
        '--logger.level=info',
        '--client.showErrorDetails=true',
        '--browser.gatherUsageStats=false'
    ]


def main():
    host = os.getenv('MINFTP_UI_HOST', '0.0.0.0')
    port = int(os.getenv('MINFTP_UI_PORT', '8501'))
    cmd = build_streamlit_command(host, port)

    logger.info(f"Starting Streamlit FTP client UI on {host}:{port}...")
    try:
        os.execvp(cmd[0], cmd)
    except OSError as e:
        logger.error(f"Failed to exec Streamlit: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
