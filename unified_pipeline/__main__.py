"""Run the demo backend: python -m unified_pipeline [--host H] [--port P]."""
from __future__ import annotations

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Unified Neural Pipeline demo backend")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    uvicorn.run("unified_pipeline.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
