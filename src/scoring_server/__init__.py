"""scoring_server — FastAPI REST API for the scoring SDK.

Exposes the ScoringEngine as an HTTP chat endpoint with session
management and reference data endpoints.  Sessions live in memory.
"""
