#!/usr/bin/env python3
"""
One-click local launcher:
- Starts the FastAPI backend on 127.0.0.1:8000 via uvicorn (skipped with --local).
- Starts the Streamlit UI on 127.0.0.1:8501, pointing API_URL at the backend.
- Opens the browser once Streamlit answers, and stops both on exit.
"""

from __future__ import annotations

import argparse
import atexit
import logging
import os
import signal
import subprocess
import sys
import tempfile
import threading
import time
import webbrowser
from pathlib import Path

import requests

from core.logging_config import configure_logging

logger = logging.getLogger("run_app")

BASE_DIR = Path(__file__).resolve().parent
BACKEND_URL = "http://127.0.0.1:8000"
STREAMLIT_URL = "http://127.0.0.1:8501"


def _pid_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


def _lock_path() -> Path:
    base = Path(os.environ.get("XDG_RUNTIME_DIR") or tempfile.gettempdir())
    lock_dir = base / "jewelcost"
    lock_dir.mkdir(parents=True, exist_ok=True)
    return lock_dir / "launcher.lock"


def acquire_lock() -> Path | None:
    path = _lock_path()
    if path.exists():
        try:
            pid = int(path.read_text().strip() or "0")
        except (OSError, ValueError):
            pid = 0
        if _pid_alive(pid):
            logger.error("Another instance is already running (PID %s); exiting.", pid)
            return None
        path.unlink(missing_ok=True)

    path.write_text(str(os.getpid()))
    atexit.register(release_lock, path)
    return path


def release_lock(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("Could not remove lock file: %s", exc)


def _process_kwargs() -> dict:
    """Put children in their own group so they can be terminated together."""
    if os.name == "nt":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def start_backend() -> subprocess.Popen | None:
    cmd = [sys.executable, "-m", "uvicorn", "main:app", "--host", "127.0.0.1", "--port", "8000"]
    logger.info("Starting FastAPI backend on %s ...", BACKEND_URL)
    try:
        return subprocess.Popen(cmd, cwd=BASE_DIR, **_process_kwargs())
    except OSError as exc:
        logger.warning("Failed to start backend (%s); the UI will run on local storage.", exc)
    return None


def start_streamlit(api_url: str | None) -> subprocess.Popen:
    env = os.environ.copy()
    env.update(
        {
            "STREAMLIT_SERVER_HEADLESS": "true",
            "STREAMLIT_BROWSER_GATHER_USAGE_STATS": "false",
        }
    )
    if api_url:
        env["API_URL"] = api_url
    else:
        env.pop("API_URL", None)
    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(BASE_DIR / "streamlit_app.py"),
        "--server.port",
        "8501",
        "--server.address",
        "127.0.0.1",
    ]
    logger.info("Starting Streamlit UI on %s (backend: %s) ...", STREAMLIT_URL, api_url or "none")
    return subprocess.Popen(cmd, cwd=BASE_DIR, env=env, **_process_kwargs())


def wait_for_url(url: str, proc: subprocess.Popen | None = None, timeout: int = 60) -> bool:
    """Poll until ``url`` answers or the timeout expires."""
    start = time.time()
    while time.time() - start < timeout:
        if proc is not None and proc.poll() is not None:
            logger.warning("Process exited before %s became ready.", url)
            return False
        try:
            resp = requests.get(url, timeout=1)
            if resp.status_code < 500:
                return True
        except requests.RequestException:
            pass
        time.sleep(1)
    logger.warning("Timed out waiting for %s.", url)
    return False


def terminate_process(proc: subprocess.Popen | None, name: str) -> None:
    if proc is None or proc.poll() is not None:
        return

    logger.info("Stopping %s ...", name)
    try:
        if os.name != "nt":
            os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
        else:
            proc.terminate()
        proc.wait(timeout=5)
    except (OSError, subprocess.TimeoutExpired):
        if os.name != "nt":
            os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
        else:
            proc.kill()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the Jewel Cost backend and UI.")
    parser.add_argument("--local", action="store_true", help="skip the backend; the UI keeps data locally")
    args = parser.parse_args(argv)

    configure_logging()
    lock_path = acquire_lock()
    if lock_path is None:
        return

    backend_proc = None
    streamlit_proc = None
    try:
        api_url = os.environ.get("API_URL") or None
        if not args.local and api_url is None:
            backend_proc = start_backend()
            if backend_proc is not None and wait_for_url(f"{BACKEND_URL}/health", backend_proc, timeout=20):
                api_url = BACKEND_URL
        streamlit_proc = start_streamlit(None if args.local else api_url)

        def open_browser_once() -> None:
            if wait_for_url(STREAMLIT_URL, streamlit_proc):
                logger.info("Streamlit is ready; opening browser ...")
                webbrowser.open_new_tab(STREAMLIT_URL)
            else:
                logger.warning("Streamlit not reachable; browser will not be opened.")

        threading.Thread(target=open_browser_once, daemon=True).start()
        while streamlit_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down ...")
    finally:
        terminate_process(streamlit_proc, "Streamlit")
        terminate_process(backend_proc, "FastAPI backend")
        release_lock(lock_path)


if __name__ == "__main__":
    main()
