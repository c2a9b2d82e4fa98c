# Ejecuta desde AgroMind/:
#   python -m scripts.init_db
#   python -m scripts.init_db --email demo@agromind.local --password demo12345 --name Demo --farm "Finca demo"
#
# Requiere que tu .env tenga DATABASE_URL y SECRET_KEY.

from argparse import ArgumentParser
from sqlalchemy.orm import Session

from utils.db import engine
from utils.security import hash_password
from utils.logger import get_logger
from models import Base, User, Farm

logger = get_logger("scripts.init_db")


def create_schema() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Esquema creado/verificado (%s tablas)", len(Base.metadata.tables))


def upsert_user(db: Session, *, email: str, password: str, name: str | None, farm_name: str | None) -> User:
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user:
        user.name = name
        user.password_hash = hash_password(password)
        logger.info("Usuario actualizado: id=%s email=%s", user.id, user.email)
    else:
        user = User(email=email, name=name, password_hash=hash_password(password))
        db.add(user)
        db.flush()
        logger.info("Usuario creado: id=%s email=%s", user.id, user.email)

    if farm_name:
        exists = (
            db.query(Farm.id)
            .filter(Farm.user_id == user.id, Farm.name == farm_name)
            .first()
        )
        if not exists:
            db.add(Farm(user_id=user.id, name=farm_name[:80], is_primary=True))
            logger.info("Finca creada para user_id=%s: %s", user.id, farm_name)

    db.commit()
    db.refresh(user)
    return user


def main():
    ap = ArgumentParser()
    ap.add_argument("--email", default=None)
    ap.add_argument("--password", default=None)
    ap.add_argument("--name", default=None)
    ap.add_argument("--farm", default=None)
    args = ap.parse_args()

    create_schema()

    if args.email:
        if not args.password:
            ap.error("--password es requerido junto con --email")
        with Session(engine) as db:
            upsert_user(db, email=args.email, password=args.password, name=args.name, farm_name=args.farm)


if __name__ == "__main__":
    main()
