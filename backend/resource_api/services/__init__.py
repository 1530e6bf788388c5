"""
Services Layer

Storage logic that:
- Accepts domain inputs (IDs, pydantic models, sessions)
- Returns domain outputs (records, or None when the id is unknown)
- Does NOT depend on HTTP request/response objects
"""
