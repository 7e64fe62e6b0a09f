"""
Traffic Cams Test Suite

Structure:
- unit/: Unit tests for individual components (no network; requests.Session is mocked)
- helpers.py: canned TomTom XML/image responses
"""
