"""
Operations Layer

Business logic that sits between the database and the leaderboard service:
- AccountOperations: account mapping lifecycle and candidate listing
- EntryBuilder: per-candidate leaderboard entry assembly
"""
