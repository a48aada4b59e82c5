"""
models/ - Domain Layer
======================
Accounts, beneficiaries, money values and reward records.
Plain dataclasses with no knowledge of the database.
"""
