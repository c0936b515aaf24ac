from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from reimbursements.config import settings
from reimbursements.log import get_logger

log = get_logger("db")

DATABASE_URL = settings.DATABASE_URL
engine = create_engine(DATABASE_URL, future=True, echo=False)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    With reset=True all tables are dropped and recreated, which is what the
    test-suite uses to get a clean database per test.
    """
    # registers every model table on Base.metadata
    import reimbursements.models  # noqa: F401

    if reset:
        log.debug("dropping all tables")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    log.debug("database initialized")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
