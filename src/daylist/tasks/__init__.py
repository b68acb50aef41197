"""
Task subsystem.

Components:
- task_models.py: data structures (TaskRecord, NoReminder, ReminderAt)
- ordering.py: display/persistence order of the list
- persistence.py: JSON codec + gateway over a key-value store
- task_store.py: the single owner of the list (CRUD, sort, save)
- reminders.py: one-shot reminder scheduling and past-due checks
- daily_reset.py: loop that clears the list at each local midnight
"""
