#!/usr/bin/env python3
"""
Place Finder Backend - Run Script
This script starts the FastAPI backend server
"""

import sys
import subprocess
from pathlib import Path

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def missing_keys(settings):
    """Names of the Maps keys left empty in the loaded settings"""
    return [
        name for name in ("GOOGLE_MAPS_SERVER_KEY", "GOOGLE_MAPS_BROWSER_KEY")
        if not getattr(settings, name)
    ]

def warn_missing_settings():
    """Warn about keys whose absence disables a feature"""
    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  Warning: .env file not found. Copy .env.example to .env to configure keys.", "yellow")

    from placefinder.core.config import Settings

    settings = Settings()
    missing = missing_keys(settings)
    if missing:
        print_colored(f"⚠️  Not configured: {', '.join(missing)} (the server will still start)", "yellow")
    return settings

def main():
    print_colored("🚀 Starting Place Finder Backend...", "blue")

    # Check if we're in the backend directory
    check_file_exists("placefinder/main.py", "placefinder/main.py not found. Please run this script from the backend directory.")

    # Check if dependencies are installed
    print_colored("🔍 Checking dependencies...", "blue")
    try:
        import fastapi  # noqa: F401
        import uvicorn  # noqa: F401
    except ImportError:
        print_colored("❌ Dependencies not installed.", "red")
        print("Install them from the project root:")
        print("  pip install -e .")
        sys.exit(1)

    settings = warn_missing_settings()
    port = str(settings.PORT)

    # Start the server
    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print(f"📍 Place Finder will be available at: http://localhost:{port}")
    print(f"📍 API Health check: http://localhost:{port}/health")
    print(f"📍 API Documentation: http://localhost:{port}/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    # Run uvicorn with auto-reload for development
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "placefinder.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", port
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
