"""Role-based authorization core: abilities, policy guard and role changes."""
