from . import auth
from . import users
from . import verification_tokens
from . import sessions
from . import accounts
