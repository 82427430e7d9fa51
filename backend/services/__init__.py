"""
Application services: leaderboard logic, HTTP client and local profile.
"""
