"""ticktock command-line interface (``ticktock``)."""
