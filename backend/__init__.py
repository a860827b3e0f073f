"""FastAPI backend for Creator Radar."""
