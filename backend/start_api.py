#!/usr/bin/env python3
"""
Reporting API Startup Script

This script starts the reporting semantic layer FastAPI server.
"""

import sys
from pathlib import Path

import uvicorn


def main():
    """Start the reporting API server."""
    print("Starting Reporting Semantic Layer API...")
    print("   POST /api/analytics/v1/query")
    print("   GET  /api/analytics/v1/schema/{dataset_id}")
    print("   GET  /api/analytics/v1/datasets")
    print("   GET  /api/analytics/v1/meta")
    print("")
    print("Documentation will be available at:")
    print("   Swagger UI:  http://localhost:8000/docs")
    print("   ReDoc:       http://localhost:8000/redoc")
    print("")

    env_file = Path(".env")
    if not env_file.exists():
        print("WARNING: No .env file found!")
        print("   Create a .env file with these variables:")
        print("   CUBE_API_URL=http://localhost:4000")
        print("   CUBE_API_TOKEN=your-cube-token")
        print("   JWT_SECRET=your-secret-key-here")
        print("")

    try:
        uvicorn.run(
            "reporting.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            reload_dirs=["reporting"],
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\nShutting down reporting API server...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
