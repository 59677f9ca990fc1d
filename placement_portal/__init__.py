"""
Campus Placement Portal
Students apply to jobs, employers review candidates, officers track placements.

Architecture:
- Relational store: users, student/employer profiles, jobs, applications
- Session store: server-side login sessions (memory or MongoDB)
"""

__version__ = "1.0.0"
