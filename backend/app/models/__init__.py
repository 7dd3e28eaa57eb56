# Import models here so Alembic autogenerate and metadata.create_all can discover them.
from app.models.limit_document import LimitDocument  # noqa: F401

# Reference host adapters: live world, teams, permission registry
from app.models.placed_entity import PlacedEntity  # noqa: F401
from app.models.team_membership import TeamMembership  # noqa: F401
from app.models.permission_grant import PermissionGrant  # noqa: F401
