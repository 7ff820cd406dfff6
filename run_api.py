#!/usr/bin/env python3
"""
Startup script for the SafePath Routing API server.

This script starts the FastAPI server with proper configuration.
"""

import os
import uvicorn
import argparse

def main():
    """Start the FastAPI server."""
    parser = argparse.ArgumentParser(description="SafePath Routing API Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"],
                       help="Log level")
    parser.add_argument("--incident-data", help="GeoJSON file of incident reports to use when no incident service is configured")

    args = parser.parse_args()

    if args.incident_data:
        os.environ["SAFEPATH_INCIDENT_DATA"] = os.path.abspath(args.incident_data)

    print("🚀 Starting SafePath Routing API Server")
    print(f"📍 URL: http://{args.host}:{args.port}")
    print(f"📚 Documentation: http://{args.host}:{args.port}/docs")
    print(f"🔍 Health check: http://{args.host}:{args.port}/health")
    if not os.environ.get("MAPBOX_API_KEY"):
        print("⚠️  MAPBOX_API_KEY is not set - route requests will fail until it is")
    print("-" * 50)

    # Ensure we're in the right directory
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    # Start the server
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        access_log=True
    )

if __name__ == "__main__":
    main()
