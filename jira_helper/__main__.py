"""Run the server with uvicorn: python -m jira_helper."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "jira_helper.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
