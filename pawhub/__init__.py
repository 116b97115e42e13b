"""PawHub pet-social marketplace backend and client."""
