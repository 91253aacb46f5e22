"""BlogSpace — HTTP routes of the local shell."""
