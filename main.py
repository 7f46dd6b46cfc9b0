"""
SkillSwap Match Engine - Main Entry Point
=========================================
Run this file to start the FastAPI server.

Usage:
    python main.py                    # Start server on port 8000
    python main.py --port 8080        # Start server on custom port
    python main.py --reload           # Start with auto-reload (dev mode)

API Documentation:
    http://localhost:8000/docs        # Swagger UI
    http://localhost:8000/redoc       # ReDoc
"""

import argparse
import uvicorn
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from skillswap_match.config.settings import SERVICE_CONFIG  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="SkillSwap Match Engine API Server")
    parser.add_argument(
        "--host",
        type=str,
        default=SERVICE_CONFIG["host"],
        help=f"Host to bind the server to (default: {SERVICE_CONFIG['host']})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=SERVICE_CONFIG["port"],
        help=f"Port to run the server on (default: {SERVICE_CONFIG['port']})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )

    args = parser.parse_args()

    print(f"""
    ╔══════════════════════════════════════════════════════════════╗
    ║                  SKILLSWAP MATCH ENGINE                      ║
    ║                      Version {SERVICE_CONFIG['version']}                           ║
    ╠══════════════════════════════════════════════════════════════╣
    ║  Server starting on http://{args.host}:{args.port}                    ║
    ║  API Docs: http://localhost:{args.port}/docs                       ║
    ║  Health:   http://localhost:{args.port}/api/health                 ║
    ╚══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "skillswap_match.api.endpoints:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        log_level=SERVICE_CONFIG["log_level"].lower(),
    )


if __name__ == "__main__":
    main()
