"""Business logic for qomoboro: statistics, task lifecycle and backups."""
