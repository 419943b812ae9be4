"""Services — orchestrate core functions around infrastructure calls."""
