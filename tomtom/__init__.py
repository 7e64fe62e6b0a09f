"""
TomTom Traffic Cams client

- Bounding-box camera search, ranked by distance from the box center
- Per-camera image fetch with placeholder fallback
- Optional HTTP surface: uvicorn tomtom.server:app --port 8000
"""
