"""PrisonSphere correctional records service."""
