import asyncio
import sys
import os
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete
import logging

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Adjust path for script execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cyf_blog.crud import crud_user
from cyf_blog.db.session import AsyncSessionLocal
from cyf_blog.models import Account, Session, VerificationToken

async def delete_user_and_associated_data(db: AsyncSession, user_email: str):
    logger.info(f"Attempting to delete user: {user_email} and associated data.")
    user = await crud_user.get_user_by_email(db, email=user_email)
    if not user:
        logger.info(f"User with email {user_email} not found.")
        return

    user_id = user.id
    try:
        logger.info(f"Deleting sessions and accounts for user_id: {user_id}...")
        await db.execute(delete(Session).where(Session.user_id == user_id))
        await db.execute(delete(Account).where(Account.user_id == user_id))

        logger.info(f"Deleting verification tokens for {user_email}...")
        await db.execute(delete(VerificationToken).where(VerificationToken.identifier == user_email))

        logger.info(f"Deleting user record for user_id: {user_id}...")
        await db.delete(user)
        await db.commit()
        logger.info(f"Successfully committed deletions for user {user_email}.")
    except Exception as e:
        logger.error(f"Error during deletion process for {user_email}: {e}", exc_info=True)
        await db.rollback()
        raise

async def main():
    if len(sys.argv) < 2:
        logger.error("Usage: python scripts/delete_user_by_email.py <user_email>")
        return

    async with AsyncSessionLocal() as db_session:
        await delete_user_and_associated_data(db_session, sys.argv[1])

if __name__ == "__main__":
    asyncio.run(main())
