"""Services: orchestration of the version sync across platforms."""
