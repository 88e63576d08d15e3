"""Infrastructure layer — broker REST client, reachability polling, and the manager."""
