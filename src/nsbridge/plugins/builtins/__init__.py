"""Built-in plugins shipped with nsbridge."""
