"""Commands for the skip request workflow."""

from .admin_direct_skip import (
    AdminDirectSkipCommand,
    AdminDirectSkipCommandHandler,
)
from .admin_skip_action import (
    AdminSkipActionCommand,
    AdminSkipActionCommandHandler,
    SkipActionResult,
)
from .bulk_direct_skip import (
    BulkDirectSkipCommand,
    BulkDirectSkipCommandHandler,
    BulkItemFailure,
    BulkOperationResult,
)
from .fix_inconsistencies import (
    FixDataInconsistenciesCommand,
    FixDataInconsistenciesCommandHandler,
)
from .user_skip_request import (
    UserSkipRequestCommand,
    UserSkipRequestCommandHandler,
)

__all__ = [
    "UserSkipRequestCommand",
    "UserSkipRequestCommandHandler",
    "AdminSkipActionCommand",
    "AdminSkipActionCommandHandler",
    "SkipActionResult",
    "AdminDirectSkipCommand",
    "AdminDirectSkipCommandHandler",
    "BulkDirectSkipCommand",
    "BulkDirectSkipCommandHandler",
    "BulkItemFailure",
    "BulkOperationResult",
    "FixDataInconsistenciesCommand",
    "FixDataInconsistenciesCommandHandler",
]
