"""
Run the FastAPI backend server.
"""

import uvicorn

from team_scheduler.core.config import API_HOST, API_PORT

if __name__ == "__main__":
    print("=" * 60)
    print("Team Scheduler API Server")
    print("=" * 60)
    print(f"Starting server on http://localhost:{API_PORT}")
    print(f"API Documentation: http://localhost:{API_PORT}/docs")
    print("=" * 60)

    uvicorn.run(
        "team_scheduler.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
        log_level="info"
    )
