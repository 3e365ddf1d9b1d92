"""
employee_store.api.__main__

Entrypoint: `python -m employee_store.api [--demo]`.

`--demo` runs the demonstration sequence once the schema exists, the same as
setting `EMPSTORE_RUN_DEMO_ON_STARTUP=true`.
"""

from __future__ import annotations

import argparse

import uvicorn

from employee_store.api.app import create_app
from employee_store.settings import get_settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="employee_store.api")
    parser.add_argument("--demo", action="store_true", help="run the demo sequence on startup")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.demo:
        settings = settings.model_copy(update={"run_demo_on_startup": True})

    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
