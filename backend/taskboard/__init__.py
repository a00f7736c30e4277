"""
Taskboard - realtime task tracking backend.

Layers:
    config    - settings and logging
    storage   - SQLite document store for tasks
    tasks     - validation and the shared mutation service
    realtime  - subscriber hub and channel event handler
    api       - FastAPI application and REST routes
"""

__version__ = "1.0.0"
