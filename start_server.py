"""
Todo API Launcher

Starts the remote todo API server used by the API storage strategy.

Usage:
    python start_server.py
    python start_server.py --port 3000
    python start_server.py --host 0.0.0.0 --port 9000 --reload
"""

import argparse

import uvicorn

from todo_manager.config import EnvConfig, ServerConfig


def main():
    EnvConfig.load_env_file()
    config = ServerConfig.from_env()

    parser = argparse.ArgumentParser(description="Todo API server")
    parser.add_argument("--host", default=config.host, help=f"Host to bind (default: {config.host})")
    parser.add_argument("--port", type=int, default=config.port, help=f"Port to bind (default: {config.port})")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    args = parser.parse_args()

    print(f"""
Todo API
    URL:      http://{args.host}:{args.port}
    Todos:    http://{args.host}:{args.port}/todos
    Health:   http://{args.host}:{args.port}/health
    Storage:  {config.data_dir if config.persist else "in memory"}
    """)

    uvicorn.run(
        "api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
