"""
Use Cases

Organized by domain folder:
- auth/: Google login, refresh, logout, profile
- stores/: Store management
- users/: Staff permissions
- activity/: Activity log queries
"""
