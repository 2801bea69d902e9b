"""
Household chore tracker.

Components:
- core/: models, pure transitions, HouseholdState, CompletionCoordinator, queries
- tasks/task_store.py: task CRUD; tasks/task_api.py: request handlers
- members/member_ledger.py: member point balances
- storage/: SQLite and JSON snapshot backends
- cli/, connectors/: console front-end
"""
