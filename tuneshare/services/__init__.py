"""Business logic: auth, tracks, users, edge toggling and external collaborators."""
