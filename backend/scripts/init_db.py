"""Create the tables, a default admin account and a handful of provinces.

Safe to run repeatedly: existing rows are left alone.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from mallmap.db import Base, get_engine
from mallmap.models import Province, User
from mallmap.models.user import ROLE_ADMIN
from mallmap.security import hash_password

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

ADMIN = {"username": "admin", "email": "admin@mallmap.com", "password": "admin123"}

SAMPLE_PROVINCES = [
    ("北京市", "110000"),
    ("上海市", "310000"),
    ("广东省", "440000"),
    ("江苏省", "320000"),
    ("浙江省", "330000"),
    ("山东省", "370000"),
    ("四川省", "510000"),
    ("湖北省", "420000"),
    ("湖南省", "430000"),
    ("河南省", "410000"),
]


def create_admin(session: Session) -> None:
    if session.scalars(select(User).where(User.email == ADMIN["email"])).first():
        logger.info("Admin user already exists")
        return
    session.add(
        User(
            username=ADMIN["username"],
            email=ADMIN["email"],
            password_hash=hash_password(ADMIN["password"]),
            role=ROLE_ADMIN,
        )
    )
    logger.info(f"Created admin user {ADMIN['email']}")


def create_sample_provinces(session: Session) -> None:
    for name, code in SAMPLE_PROVINCES:
        if session.scalars(select(Province).where(Province.name == name)).first():
            logger.info(f"Province {name} already exists")
            continue
        session.add(Province(name=name, code=code))
        logger.info(f"Created province {name}")


def init_db():
    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    with Session(engine) as session:
        create_admin(session)
        create_sample_provinces(session)
        session.commit()
    logger.info("Database initialised")


if __name__ == "__main__":
    init_db()
