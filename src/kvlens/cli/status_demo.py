"""Status screen demo driven by a background worker."""

import threading
import time
from typing import Any, Dict, Optional

import typer

from ..config import load_config
from ..exceptions import KvlensError
from ..logging_config import setup_logging
from ..views import CompletionChannel, DisplaySchema
from ..views.schema import schema_from_dict
from . import app
from ._common import fail

DEMO_URL = "https://example.com/deployments/42"


def demo_document() -> Dict[str, Any]:
    return {
        "title": "Deploying web-frontend",
        "messages": ["Uploading build artifacts", "Waiting for health checks"],
        "deployment": "deploy-42",
        "url": DEMO_URL,
    }


def demo_schema(timeout: Optional[str] = None, wait_for_key: bool = True) -> DisplaySchema:
    status = {
        "titleField": "title",
        "messageField": "messages",
        "waitMessage": "Waiting for the deployment to finish...",
        "successMessage": "Deployment finished",
        "doneBehavior": "wait-for-key" if wait_for_key else "exit-after-delay",
        "displayFields": [
            {"label": "Deployment", "field": "deployment"},
            {"label": "URL", "field": "url"},
        ],
        "actions": [
            {
                "label": "copy id",
                "type": "copy-value",
                "field": "deployment",
                "keys": {"vim": "y", "emacs": "ctrl+y", "function": "f5"},
            },
            {
                "label": "open",
                "type": "open-url",
                "field": "url",
                "keys": {"vim": "o", "emacs": "ctrl+o", "function": "f6"},
            },
        ],
    }
    if timeout:
        status["timeout"] = timeout
    return schema_from_dict({"displaySchema": "v1", "status": status})


def start_worker(channel: CompletionChannel, seconds: float, failure: bool) -> threading.Thread:
    """Complete *channel* from a daemon thread after *seconds*."""

    def work() -> None:
        time.sleep(seconds)
        if failure:
            channel.fail("Health checks did not pass")
        else:
            channel.succeed("Deployment is live")

    thread = threading.Thread(target=work, name="kvlens-status-demo", daemon=True)
    thread.start()
    return thread


@app.command("status-demo")
def status_demo(
    failure: bool = typer.Option(
        False,
        "--fail",
        help="Finish with an error instead of success",
    ),
    seconds: float = typer.Option(
        3.0,
        "--seconds",
        "-n",
        help="Seconds until the worker completes",
        min=0.0,
    ),
    timeout: Optional[str] = typer.Option(
        None,
        "--timeout",
        help="Status timeout as a duration, e.g. 2s",
    ),
    exit_after: bool = typer.Option(
        False,
        "--exit-after-delay",
        help="Exit on its own after completion instead of waiting for a key",
    ),
    key_mode: Optional[str] = typer.Option(
        None,
        "--key-mode",
        "-k",
        help="Key bindings: vim | emacs | function",
    ),
):
    """
    Show the status screen while a background job runs.

    [bold cyan]Examples:[/bold cyan]

      kvlens status-demo

      kvlens status-demo --fail --seconds 1

      kvlens status-demo --seconds 10 --timeout 2s
    """
    try:
        settings = load_config(key_mode=key_mode)
        schema = demo_schema(timeout=timeout, wait_for_key=not exit_after)
    except KvlensError as e:
        fail(e)

    setup_logging(log_file=settings.log_file, terminal=False)

    from ..tui import run_explorer

    channel = CompletionChannel()
    start_worker(channel, seconds, failure)
    run_explorer(demo_document(), config=settings, schema=schema, channel=channel)
