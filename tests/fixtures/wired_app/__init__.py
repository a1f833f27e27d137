"""Sample application discovered by the container tests."""
