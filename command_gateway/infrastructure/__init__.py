"""Infrastructure layer - adapters implementing the domain protocols."""
