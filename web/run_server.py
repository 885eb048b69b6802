"""
Starts the backend API server
"""

import os
import subprocess
import sys


def main():
    # run from the project root so core/schedulers/utils resolve
    project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    print("=" * 60)
    print("  CPU Scheduler Comparison - API server")
    print("=" * 60)
    print()
    print("API docs: http://localhost:8000/docs")
    print("Press Ctrl+C to stop.")
    print("-" * 60)

    return subprocess.run([sys.executable, '-m', 'uvicorn', 'web.backend.app:app',
                           '--host', '0.0.0.0', '--port', '8000'],
                          cwd=project_dir).returncode


if __name__ == "__main__":
    sys.exit(main())
