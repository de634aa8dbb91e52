from siteapi.infrastructure.database.models.user_model import UserModel  # noqa: F401
from siteapi.infrastructure.database.models.user_role_model import UserRoleModel  # noqa: F401
from siteapi.infrastructure.database.models.profile_model import ProfileModel  # noqa: F401
from siteapi.infrastructure.database.models.refresh_token_model import RefreshTokenModel  # noqa: F401
from siteapi.infrastructure.database.models.rate_limit_model import RateLimitModel  # noqa: F401
from siteapi.infrastructure.database.models.blocked_ip_model import BlockedIpModel  # noqa: F401
from siteapi.infrastructure.database.models.audit_log_model import AuditLogModel  # noqa: F401
