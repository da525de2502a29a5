"""Employee management service: accounts, attendance, leave, salary and documents."""

__version__ = "1.0.0"
