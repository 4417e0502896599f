"""Task Manager API: personal tasks with single-prerequisite dependencies and recurrence."""
