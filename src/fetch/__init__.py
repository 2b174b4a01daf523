"""Package fetching: cache checks, downloads and batch orchestration."""
