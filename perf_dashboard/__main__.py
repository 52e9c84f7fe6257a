"""Run the dashboard with uvicorn: ``python -m perf_dashboard``."""

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Consultant performance dashboard")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    args = parser.parse_args()
    uvicorn.run("perf_dashboard.main:create_app", factory=True, host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
