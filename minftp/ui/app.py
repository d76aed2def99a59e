import os
import tempfile
import threading
import time
import traceback
import logging
from datetime import datetime

import streamlit as st

from minftp.core import ClientCommandHandler, FTPClientError, LocalFileStore, Session

# Configure logging for Streamlit app
logging.basicConfig(
    level=os.getenv("MINFTP_LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


st.set_page_config(page_title="minftp", layout="wide")

# --- Helpers -----------------------------------------------------------------

class OutputBuffer:
    """Collects what the session reports so the page can render it."""

    def __init__(self):
        self.lines = []

    def __call__(self, text: str):
        self.lines.append(text)

    def drain(self) -> str:
        text = "\n".join(self.lines)
        self.lines.clear()
        return text


# A lightweight wrapper to run blocking network calls in a thread and capture exceptions
def run_in_thread(fn, *args, **kwargs):
    result = {"value": None, "error": None}
    def target():
        try:
            result["value"] = fn(*args, **kwargs)
        except FTPClientError as e:
            result["error"] = e
        except OSError as e:
            result["error"] = e
    t = threading.Thread(target=target)
    t.start()
    return t, result


def run_blocking(label: str, fn, *args):
    t, result = run_in_thread(fn, *args)
    with st.spinner(label):
        while t.is_alive():
            time.sleep(0.05)
    return result


# --- UI ----------------------------------------------------------------------
st.title("minftp")

if "session" not in st.session_state:
    st.session_state["session"] = None
    st.session_state["handler"] = None
    st.session_state["output"] = OutputBuffer()
    st.session_state["workdir"] = tempfile.mkdtemp(prefix="minftp_")

output: OutputBuffer = st.session_state["output"]
workdir: str = st.session_state["workdir"]

with st.sidebar:
    st.header("Connection")
    host = st.text_input("Host", value="127.0.0.1")
    port = st.number_input("Port", min_value=1, max_value=65535, value=21)
    timeout = st.number_input("Timeout (s)", min_value=1.0, max_value=300.0, value=30.0)
    username = st.text_input("Username", value="anonymous", max_chars=128)
    password = st.text_input("Password", type="password", max_chars=128)
    if st.button("Connect"):
        logger.info(f"[UI] Connect button clicked: {host}:{port}")
        previous = st.session_state.get("session")
        if previous is not None:
            previous.close()
            st.session_state["session"] = None
            st.session_state["handler"] = None
        session = Session(host, int(port), timeout=float(timeout),
                          files=LocalFileStore(workdir), output=output)
        result = run_blocking("Connecting...", session.connect)
        if session.is_connected:
            result = run_blocking("Logging in...", session.login, username, password)
            st.session_state["session"] = session
            st.session_state["handler"] = ClientCommandHandler(session, output=output)
            if result["value"]:
                st.success(f"Logged in to {host}:{port}")
            else:
                st.warning(f"Connected to {host}:{port}, login was not accepted")
        else:
            st.error(f"Connection to {host}:{port} failed")
        st.code(output.drain())
    if st.button("Disconnect"):
        session = st.session_state.get("session")
        if session:
            logger.info("[UI] Disconnect button clicked")
            run_blocking("Disconnecting...", session.quit)
            st.session_state["session"] = None
            st.session_state["handler"] = None
            st.info("Disconnected")
            st.code(output.drain())


col1, col2 = st.columns([3, 1])

with col1:
    st.subheader("Terminal")
    cmd = st.text_input("Command", placeholder="e.g. dir, get notes.txt, put, cd pub, pwd, syst", key="cmd_input")
    cmd_run = st.button("Run")

    # File upload for put
    uploaded_file = st.file_uploader("File for put", key="upload_file")

    if cmd_run and cmd:
        logger.info(f"[UI] Command executed: {cmd}")
        handler: ClientCommandHandler = st.session_state.get("handler")
        if not handler:
            st.error("Not connected. Connect first.")
        else:
            try:
                verb = cmd.strip().split(' ', 1)[0].lower()
                line = cmd
                if verb == "put":
                    if uploaded_file is None:
                        st.error("Select a file to upload using the uploader above.")
                        line = None
                    else:
                        local_path = os.path.join(workdir, uploaded_file.name)
                        with open(local_path, "wb") as f:
                            f.write(uploaded_file.getbuffer())
                        line = f"put {uploaded_file.name}"
                if line:
                    result = run_blocking("Running...", handler.dispatch, line)
                    if result["error"]:
                        st.error(f"Error: {result['error']}")
                    if not handler.session.is_connected:
                        st.session_state["session"] = None
                        st.session_state["handler"] = None
                    st.code(output.drain())

                    last = handler.get_history()[-1] if handler.get_history() else None
                    if verb == "get" and not result["error"] and last and last["response"]:
                        local_path = handler.session.files.path_for(last["response"])
                        with open(local_path, "rb") as f:
                            st.download_button("Download", data=f.read(), file_name=os.path.basename(last["response"]))
            except (FTPClientError, OSError):
                logger.error(f"[UI] Command failed: {traceback.format_exc()}")
                st.error(f"Command failed:\n{traceback.format_exc()}")

with col2:
    st.subheader("History")
    handler: ClientCommandHandler = st.session_state.get("handler")
    if handler is None:
        st.info("No history: not connected")
    else:
        if st.button("Clear History"):
            handler.clear_history()
            st.rerun()
        for entry in reversed(handler.get_history()[-100:]):
            t = entry.get("time")
            time_str = t.isoformat() if isinstance(t, datetime) else str(t)
            with st.expander(f"{time_str} — {entry.get('command')}"):
                if entry.get("response"):
                    st.code(entry.get("response"))
                if entry.get("error"):
                    st.error("This entry had an error")


# Footer
st.markdown("---")
st.caption("minftp Streamlit UI: passive-mode transfers and command history.")
