"""
Maintenance scripts for the admin console database.

    python -m scripts.seed_data     # sample requests and admin roles
    python -m scripts.check_admins  # list admin role assignments
"""
