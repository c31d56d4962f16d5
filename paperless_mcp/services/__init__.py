"""Services shared by the tool layer."""
