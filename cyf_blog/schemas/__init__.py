# flake8: noqa
from .common import ApiResponse, ErrorResponse, StatusMessage, ok
from .user import (
    User, UserBase, UserRegister, UserCreate, UserUpdate, UserUpdateInternal,
    UserPage, UserLogin, UsernameCheck, EmailCheck
)
from .token import Token, TokenWithUser, TokenPayload
from .session import Session
from .account import Account, AccountCreate
from .verification_token import VerificationToken, VerificationTokenCreate, VerificationState
from .mail import MailOptions
from . import common, user, token, session, account, verification_token, mail
