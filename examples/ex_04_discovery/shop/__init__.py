"""Sample shop package scanned by the discovery example."""
