# Import individual CRUD modules so they can be accessed via the package
from . import crud_user # noqa
from . import crud_session # noqa
from . import crud_account # noqa
from . import crud_verification_token # noqa
