"""Runs a build command and passes when it exits with status 0."""

import asyncio
import logging
import shlex

logger = logging.getLogger(__name__)

name = "Build Check"
description = "Verifies that the build passes for the branch associated with this issue"
parameters = [
    {
        "name": "branch",
        "type": "string",
        "description": "Git branch name to check (defaults to the lower-cased issue key)",
        "required": False,
    },
    {
        "name": "buildCommand",
        "type": "string",
        "description": "Build command to run",
        "default": "pytest -q",
    },
    {
        "name": "workingDir",
        "type": "string",
        "description": "Directory to run the build in",
        "required": False,
    },
]

_MAX_OUTPUT_CHARS = 2000


async def verify(issue_key, parameters):
    branch = parameters.get("branch") or issue_key.lower()
    command = parameters.get("buildCommand") or "pytest -q"
    logger.info("Running build check for %s on branch %s: %s", issue_key, branch, command)

    try:
        process = await asyncio.create_subprocess_exec(
            *shlex.split(command),
            cwd=parameters.get("workingDir") or None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (OSError, ValueError) as e:
        return f"Build verification error: {e}"

    _, stderr = await process.communicate()
    if process.returncode == 0:
        return "ok"

    output = stderr.decode("utf-8", errors="replace").strip()[-_MAX_OUTPUT_CHARS:]
    return f"Build failed with exit code {process.returncode}:\n{output}"
