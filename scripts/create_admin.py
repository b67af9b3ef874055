import argparse
import asyncio
import getpass
import logging
import os
import sys

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Ensure correct paths for script execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cyf_blog.crud import crud_user
from cyf_blog.db.base_class import utcnow
from cyf_blog.db.session import AsyncSessionLocal
from cyf_blog.models.enums import UserRole
from cyf_blog.schemas.user import UserCreate, UserUpdateInternal

async def create_or_promote_admin(username: str, email: str, password: str | None) -> None:
    async with AsyncSessionLocal() as db:
        user = await crud_user.get_user_by_email(db, email=email)
        if user:
            await crud_user.update_user_internal(db, db_obj=user, obj_in=UserUpdateInternal(role=UserRole.ADMIN))
            logger.info(f"Promoted existing user {user.id} ({email}) to ADMIN.")
            return

        if not password:
            password = getpass.getpass("Password for the new admin: ")
        user = await crud_user.create_user(
            db,
            obj_in=UserCreate(username=username, nickname=username, email=email, password=password, role=UserRole.ADMIN),
        )
        # Admins created here do not go through email verification
        await crud_user.update_user_internal(db, db_obj=user, obj_in=UserUpdateInternal(email_verified=utcnow()))
        logger.info(f"Created admin {user.id} ({email}).")

def main():
    parser = argparse.ArgumentParser(description="Create an admin user or promote an existing one.")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--password", default=None)
    args = parser.parse_args()
    asyncio.run(create_or_promote_admin(args.username, args.email, args.password))

if __name__ == "__main__":
    main()
