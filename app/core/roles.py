# app/core/roles.py

ROLE_ADMIN = "admin"
ROLE_TEAM_LEADER = "team_leader"
ROLE_USER = "user"

ALL_ROLES = (ROLE_ADMIN, ROLE_TEAM_LEADER, ROLE_USER)
