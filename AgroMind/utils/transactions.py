# utils/transactions.py
from contextlib import contextmanager

from sqlalchemy.orm import Session

from utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def uow(db: Session, label: str = "uow"):
    """
    Unidad de trabajo sobre la sesión del request.

    Uso:
        with uow(db, "save_map") as tx:
            tx.query(MapZone).filter(...).delete()
            tx.add_all(...)

    Commit al salir del bloque; ante cualquier error hace rollback y re-lanza.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Rollback de %s", label)
        raise
