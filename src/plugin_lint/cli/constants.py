"""Shared constants for plugin-lint CLI commands."""

# Process exit codes
EXIT_OK = 0
EXIT_VALIDATION_FAILED = 1
EXIT_ENVIRONMENT_ERROR = 2  # Also used for internal errors
EXIT_INTERRUPTED = 130  # 128 + SIGINT

# Set to any value to disable ANSI styling (https://no-color.org)
NO_COLOR_ENV = "NO_COLOR"
